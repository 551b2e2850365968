from langgraph.graph import StateGraph, END
from src.graph.state import (
    PipelineState,
    Document,
    DocumentFormat,
    LogEntry,
    StageAgent,
    PROCESSING_PLACEHOLDER,
)
from src.agents.classifier_agent import ClassifierAgent
from src.agents.email_agent import EmailAgent
from src.agents.json_agent import JSONAgent
from src.agents.pdf_agent import PDFAgent
from src.agents.action_router_agent import ActionRouterAgent
from src.gateway.llm_gateway import InferenceGateway, LLMGateway
from src.memory.run_log import RunLog
from src.models.output_schema import RunOutput
from src.tools.action_dispatcher import ActionDispatcher, build_dispatcher
from src.config.logger import setup_logger
from src.config.exception import AppException, FatalStageError
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, Optional
import time
import sys

logger = setup_logger("DocumentRoutingWorkflow", "workflow.log")

EXTRACTION_NODES = {
    DocumentFormat.EMAIL: "email_extraction",
    DocumentFormat.JSON: "json_extraction",
    DocumentFormat.PDF: "pdf_extraction",
}


class DocumentRoutingWorkflow:
    """LangGraph workflow: classify -> format-specific extraction -> action routing"""

    def __init__(
        self,
        gateway: Optional[InferenceGateway] = None,
        dispatcher: Optional[ActionDispatcher] = None,
        run_log: Optional[RunLog] = None,
    ):
        try:
            logger.info("Initializing DocumentRoutingWorkflow")
            gateway = gateway or LLMGateway()
            self.classifier = ClassifierAgent(gateway)
            self.email_agent = EmailAgent(gateway)
            self.json_agent = JSONAgent(gateway)
            self.pdf_agent = PDFAgent(gateway)
            self.router = ActionRouterAgent(gateway, dispatcher or build_dispatcher())
            self.run_log = run_log if run_log is not None else RunLog()

            # Runs are serialized so their log entries never interleave
            self._run_lock = Lock()

            self.workflow = self._build_graph()
            logger.info("DocumentRoutingWorkflow initialized successfully")
        except AppException:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize DocumentRoutingWorkflow: {e}")
            raise AppException(e, sys)

    def _build_graph(self):
        """Build the LangGraph workflow"""
        logger.debug("Building LangGraph workflow")

        graph = StateGraph(PipelineState)

        graph.add_node("classification", self._run_classification)
        graph.add_node("email_extraction", self._run_email_extraction)
        graph.add_node("json_extraction", self._run_json_extraction)
        graph.add_node("pdf_extraction", self._run_pdf_extraction)
        graph.add_node("action_routing", self._run_action_routing)

        graph.set_entry_point("classification")

        graph.add_conditional_edges(
            "classification",
            self._route_after_classification,
            {
                "email_extraction": "email_extraction",
                "json_extraction": "json_extraction",
                "pdf_extraction": "pdf_extraction",
                "end": END,
            },
        )

        for node in EXTRACTION_NODES.values():
            graph.add_conditional_edges(
                node,
                self._route_after_extraction,
                {"action_routing": "action_routing", "end": END},
            )

        graph.add_edge("action_routing", END)

        logger.debug("LangGraph workflow built successfully")
        return graph.compile()

    def _run_stage(
        self,
        state: PipelineState,
        agent: StageAgent,
        stage_input: Dict[str, Any],
        call: Callable[[], Any],
        describe_action: Optional[Callable[[Any], str]] = None,
    ) -> Any:
        """
        Run one stage and record its two log entries.

        Both entries are appended together once the stage settles, so a failing
        stage is in the log before the run stops. Returns None on failure.
        """
        started = LogEntry(agent=agent, input=stage_input, output=PROCESSING_PLACEHOLDER)
        start = time.time()

        try:
            result = call()
        except Exception as e:
            duration = time.time() - start
            error = FatalStageError(agent.value, e, sys)
            self.run_log.append([
                started,
                LogEntry(agent=agent, input=stage_input, output={"error": error.message}),
            ])
            state["error"] = error.message
            state["failed_stage"] = agent
            state["agent_execution_trace"][agent.value] = {
                "duration_ms": duration * 1000,
                "status": "failed",
            }
            logger.error(f"{agent.value} failed after {duration*1000:.2f}ms: {error.message}")
            return None

        duration = time.time() - start
        self.run_log.append([
            started,
            LogEntry(
                agent=agent,
                input=stage_input,
                output=result.model_dump(mode="json"),
                action=describe_action(result) if describe_action else None,
            ),
        ])
        state["agent_execution_trace"][agent.value] = {
            "duration_ms": duration * 1000,
            "status": "success",
        }
        logger.info(f"{agent.value} completed in {duration*1000:.2f}ms")
        return result

    def _run_classification(self, state: PipelineState) -> PipelineState:
        document = state["document"]
        state["classification"] = self._run_stage(
            state,
            StageAgent.CLASSIFIER,
            {"document_content": document.content, "document_format": document.declared_format.value},
            lambda: self.classifier.classify(document.content, document.declared_format),
        )
        return state

    def _run_email_extraction(self, state: PipelineState) -> PipelineState:
        document = state["document"]
        state["extraction_agent"] = StageAgent.EMAIL_AGENT
        state["extraction"] = self._run_stage(
            state,
            StageAgent.EMAIL_AGENT,
            {"email_content": document.content},
            lambda: self.email_agent.extract(document.content),
        )
        return state

    def _run_json_extraction(self, state: PipelineState) -> PipelineState:
        document = state["document"]
        state["extraction_agent"] = StageAgent.JSON_AGENT
        state["extraction"] = self._run_stage(
            state,
            StageAgent.JSON_AGENT,
            {"webhook_data": document.content},
            lambda: self.json_agent.extract(document.content),
        )
        return state

    def _run_pdf_extraction(self, state: PipelineState) -> PipelineState:
        document = state["document"]
        state["extraction_agent"] = StageAgent.PDF_AGENT
        state["extraction"] = self._run_stage(
            state,
            StageAgent.PDF_AGENT,
            {"pdf_file_name": document.source_name, "content_length": len(document.content)},
            lambda: self.pdf_agent.extract(document.content, document.source_name),
        )
        return state

    def _run_action_routing(self, state: PipelineState) -> PipelineState:
        classification = state["classification"]
        extraction = state["extraction"]
        intent = classification.intent.value
        doc_format = classification.format.value

        state["route"] = self._run_stage(
            state,
            StageAgent.ACTION_ROUTER,
            {"agent_output": extraction.model_dump(mode="json"), "intent": intent, "format": doc_format},
            lambda: self.router.route(extraction, intent, doc_format),
            describe_action=lambda decision: f"Action: {decision.action_taken.value}",
        )
        return state

    def _route_after_classification(self, state: PipelineState) -> str:
        if state.get("error"):
            logger.warning("Classification failed, ending run")
            return "end"
        node = EXTRACTION_NODES[state["classification"].format]
        logger.debug(f"Routing to {node}")
        return node

    def _route_after_extraction(self, state: PipelineState) -> str:
        if state.get("error"):
            logger.warning(f"{state['failed_stage'].value} failed, skipping action routing")
            return "end"
        return "action_routing"

    def run(self, document: Document) -> RunOutput:
        """Run the complete pipeline for one document"""
        with self._run_lock:
            logger.info("=" * 60)
            logger.info(f"Processing {document.declared_format.value} document: {document.source_name or 'inline content'}")
            logger.info("=" * 60)

            start_time = time.time()

            initial_state = PipelineState(
                document=document,
                classification=None,
                extraction_agent=None,
                extraction=None,
                route=None,
                error=None,
                failed_stage=None,
                processing_timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
                processing_duration=0.0,
                agent_execution_trace={},
            )

            try:
                logger.info("Starting workflow execution")
                final_state = self.workflow.invoke(initial_state)
            except Exception as e:
                logger.error(f"Workflow execution failed: {e}")
                raise AppException(e, sys)

            final_state["processing_duration"] = time.time() - start_time

            logger.info("=" * 60)
            if final_state.get("error"):
                logger.info(f"Run stopped at {final_state['failed_stage'].value} ({final_state['processing_duration']:.2f}s)")
            else:
                logger.info(f"Processing complete ({final_state['processing_duration']:.2f}s)")
            logger.info("=" * 60)

            return self._format_output(final_state)

    def clear_log(self) -> int:
        return self.run_log.clear()

    def _format_output(self, state: PipelineState) -> RunOutput:
        document = state["document"]

        def dump(model):
            return model.model_dump(mode="json") if model is not None else None

        failed_stage = state.get("failed_stage")
        extraction_agent = state.get("extraction_agent")

        return RunOutput(
            processing_timestamp=state["processing_timestamp"],
            processing_duration_seconds=state["processing_duration"],
            document_info={
                "declared_format": document.declared_format.value,
                "source_name": document.source_name,
                "content_length": len(document.content),
            },
            classification=dump(state.get("classification")),
            extraction_agent=extraction_agent.value if extraction_agent else None,
            extraction=dump(state.get("extraction")),
            route=dump(state.get("route")),
            error=state.get("error"),
            failed_stage=failed_stage.value if failed_stage else None,
            agent_execution_trace=state["agent_execution_trace"],
        )
