"""
Graph Package

Contains LangGraph workflow components:
- state: PipelineState and the document, stage result and log entry models
- workflow: DocumentRoutingWorkflow orchestrating classifier, extractors and router
  (import from src.graph.workflow)
"""

from src.graph.state import (
    PipelineState,
    Document,
    DocumentFormat,
    Intent,
    ActionType,
    StageAgent,
    ClassificationResult,
    EmailExtraction,
    JSONExtraction,
    PDFExtraction,
    RouteDecision,
    LogEntry,
)

__all__ = [
    "PipelineState",
    "Document",
    "DocumentFormat",
    "Intent",
    "ActionType",
    "StageAgent",
    "ClassificationResult",
    "EmailExtraction",
    "JSONExtraction",
    "PDFExtraction",
    "RouteDecision",
    "LogEntry",
]
