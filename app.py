"""
FastAPI Backend for the Document Triage pipeline

Provides REST API endpoints for:
- Running the classify -> extract -> route pipeline on inline content or uploads
- Reading and clearing the run log
- Health checks
"""

from fastapi import FastAPI, UploadFile, File, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone

from src.graph.workflow import DocumentRoutingWorkflow
from src.graph.state import Document, DocumentFormat, StageAgent
from src.models.output_schema import RunOutput
from src.tools import pdf_text
from src.utils.documents import format_for_filename
from src.config.logger import setup_logger
from src.config.exception import AppException

logger = setup_logger("FastAPIApp", "fastapi_app.log")

app = FastAPI(
    title="Document Triage AI",
    description="Classify inbound documents, extract their fields and route follow-up actions",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize workflow (singleton); its run log lives as long as the process
workflow = None


# Request / Response Models
class ProcessRequest(BaseModel):
    content: str
    declared_format: DocumentFormat


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str


class RunLogResponse(BaseModel):
    count: int
    entries: List[Dict[str, Any]]


class ClearLogResponse(BaseModel):
    message: str
    removed: int


def get_workflow() -> DocumentRoutingWorkflow:
    """Get or create workflow instance"""
    global workflow
    if workflow is None:
        logger.info("Initializing workflow...")
        workflow = DocumentRoutingWorkflow()
    return workflow


def build_document(content: str, declared_format: DocumentFormat, source_name: Optional[str] = None) -> Document:
    """Build a Document, converting PDF data URIs to text first"""
    if declared_format == DocumentFormat.PDF and pdf_text.is_pdf_data_uri(content):
        try:
            content = pdf_text.extract_text(content)
        except AppException as e:
            raise HTTPException(status_code=400, detail=e.message)

    try:
        return Document(content=content, declared_format=declared_format, source_name=source_name)
    except ValidationError:
        raise HTTPException(status_code=400, detail=f"Please provide content for {declared_format.value}.")


def health_payload() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version="1.0.0"
    )


# API Endpoints
@app.get("/", response_model=HealthResponse)
async def root():
    """Health check endpoint"""
    return health_payload()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return health_payload()


@app.post("/api/process", response_model=RunOutput)
def process_document(request: ProcessRequest, wf: DocumentRoutingWorkflow = Depends(get_workflow)):
    """
    Run the pipeline on inline content.

    A failing stage does not produce an HTTP error: the response carries the
    results reached so far plus ``error`` and ``failed_stage``.
    """
    document = build_document(request.content, request.declared_format)
    logger.info(f"Processing inline {document.declared_format.value} document")
    return wf.run(document)


@app.post("/api/process-file", response_model=RunOutput)
async def process_file(
    document: UploadFile = File(...),
    wf: DocumentRoutingWorkflow = Depends(get_workflow),
):
    """
    Run the pipeline on an uploaded file.

    The format comes from the extension: .json, .pdf, or .eml/.txt for emails.
    """
    filename = document.filename or ""
    declared_format = format_for_filename(filename)
    if declared_format is None:
        raise HTTPException(status_code=400, detail="File must be .json, .pdf, .eml or .txt")

    raw = await document.read()
    logger.info(f"Processing uploaded {declared_format.value} file: {filename}")

    # PDF parsing and the pipeline run block, keep them off the event loop
    return await run_in_threadpool(run_upload, wf, raw, declared_format, filename)


def run_upload(wf: DocumentRoutingWorkflow, raw: bytes, declared_format: DocumentFormat, filename: str) -> RunOutput:
    if declared_format == DocumentFormat.PDF:
        try:
            content = pdf_text.extract_text(raw)
        except AppException as e:
            raise HTTPException(status_code=400, detail=e.message)
    else:
        content = raw.decode("utf-8", errors="replace")

    return wf.run(build_document(content, declared_format, filename))


@app.get("/api/log", response_model=RunLogResponse)
def get_run_log(agent: Optional[StageAgent] = None, wf: DocumentRoutingWorkflow = Depends(get_workflow)):
    """Get all run log entries, optionally for one agent"""
    entries = wf.run_log.to_records(agent)
    return RunLogResponse(count=len(entries), entries=entries)


@app.delete("/api/log", response_model=ClearLogResponse)
def clear_run_log(wf: DocumentRoutingWorkflow = Depends(get_workflow)):
    """Remove every run log entry"""
    removed = wf.clear_log()
    return ClearLogResponse(message="Run log cleared", removed=removed)


# Run with: uvicorn app:app --reload --port 8000
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
