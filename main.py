import json
from pathlib import Path
from src.graph.workflow import DocumentRoutingWorkflow
from src.utils.documents import FORMAT_BY_EXTENSION, load_document
from dotenv import load_dotenv


def main():
    """Main execution function"""

    load_dotenv()

    workflow = DocumentRoutingWorkflow()

    document_dir = Path("data/documents")
    output_dir = Path("data/outputs")
    output_dir.mkdir(parents=True, exist_ok=True)

    document_files = sorted(
        path for path in document_dir.glob("*") if path.suffix.lower() in FORMAT_BY_EXTENSION
    )

    for document_file in document_files:
        try:
            result = workflow.run(load_document(document_file))

            output_file = output_dir / f"{document_file.stem}_result.json"
            with open(output_file, 'w') as f:
                json.dump(result.model_dump(mode="json"), f, indent=2)

            if result.error:
                print(f"⚠️  {document_file.name} stopped at {result.failed_stage}: {result.error}")
            print(f"✅ Saved results to {output_file}\n")

        except Exception as e:
            print(f"❌ Error processing {document_file}: {e}\n")
            continue

    log_file = output_dir / "run_log.json"
    with open(log_file, 'w') as f:
        json.dump(workflow.run_log.to_records(), f, indent=2)
    print(f"📝 Wrote {len(workflow.run_log)} log entries to {log_file}")


if __name__ == "__main__":
    main()
