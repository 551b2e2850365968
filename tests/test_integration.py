import sys

import pytest
from pydantic import ValidationError

from src.config.exception import GatewayError
from src.graph.state import Document, DocumentFormat, StageAgent, PROCESSING_PLACEHOLDER
from src.graph.workflow import DocumentRoutingWorkflow
from src.models.gateway_schema import (
    ClassificationOutput,
    EmailOutput,
    JSONCheckOutput,
    PDFOutput,
    RouteOutput,
)

VALID_WEBHOOK = '{"id":1,"amount":50.5,"timestamp":"2024-01-01T00:00:00Z"}'

KNOWN_ACTIONS = {"log_and_close", "create_ticket", "escalate_issue", "flag_compliance_risk"}


def _json_document(content=VALID_WEBHOOK):
    return Document(content=content, declared_format=DocumentFormat.JSON)


def _email_document():
    return Document(
        content="From: jane@acme.com\nThis is the third time my order is late. Fix it now.",
        declared_format=DocumentFormat.EMAIL,
    )


def test_valid_webhook_runs_all_stages(workflow, gateway, dispatcher, run_log):
    """Well-formed JSON is classified, validated and routed"""
    gateway.script(ClassificationOutput, {"format": "JSON", "intent": "RFQ"})
    gateway.script(RouteOutput, {"action_taken": "create_ticket", "details": "Ticket created for RFQ"})

    result = workflow.run(_json_document())

    assert result.succeeded
    assert result.classification == {"format": "JSON", "intent": "RFQ"}
    assert result.extraction_agent == "JSONAgent"
    assert result.extraction["is_valid"] is True
    assert result.extraction["total_keys"] == 3
    assert result.route["action_taken"] in KNOWN_ACTIONS
    assert result.route["details"]
    assert dispatcher.sent[0][0] == "/crm/create_ticket"

    # Deterministic validation never calls the gateway
    assert gateway.called_with(JSONCheckOutput) == []

    entries = run_log.entries()
    assert [entry.agent for entry in entries] == [
        StageAgent.CLASSIFIER,
        StageAgent.CLASSIFIER,
        StageAgent.JSON_AGENT,
        StageAgent.JSON_AGENT,
        StageAgent.ACTION_ROUTER,
        StageAgent.ACTION_ROUTER,
    ]
    assert [entry.output == PROCESSING_PLACEHOLDER for entry in entries] == [
        True, False, True, False, True, False
    ]
    assert entries[-1].action == "Action: create_ticket"
    assert [entry.timestamp for entry in entries] == sorted(entry.timestamp for entry in entries)


def test_malformed_webhook_uses_gateway_anomalies(workflow, gateway):
    gateway.script(ClassificationOutput, {"format": "JSON", "intent": "Invoice"})
    gateway.script(JSONCheckOutput, {"anomalies": ["Property names must be double-quoted"]})
    gateway.script(RouteOutput, {"action_taken": "create_ticket"})

    result = workflow.run(_json_document("{id:1,}"))

    assert result.extraction["is_valid"] is False
    assert result.extraction["anomalies"] == [
        "Invalid JSON syntax",
        "Property names must be double-quoted",
    ]
    assert result.extraction["total_keys"] is None
    assert result.succeeded


def test_classifier_failure_stops_run(workflow, gateway, dispatcher, run_log):
    """Only the classifier's two entries are logged when it fails"""
    gateway.script(ClassificationOutput, GatewayError("model unavailable", sys))

    result = workflow.run(_email_document())

    assert not result.succeeded
    assert result.error == "model unavailable"
    assert result.failed_stage == "Classifier"
    assert result.classification is None
    assert result.extraction is None
    assert result.route is None
    assert dispatcher.sent == []

    entries = run_log.entries()
    assert len(entries) == 2
    assert entries[0].output == PROCESSING_PLACEHOLDER
    assert entries[1].output == {"error": "model unavailable"}
    assert result.agent_execution_trace["Classifier"]["status"] == "failed"


def test_extractor_failure_keeps_classification(workflow, gateway, dispatcher, run_log):
    gateway.script(ClassificationOutput, {"format": "Email", "intent": "Complaint"})
    gateway.script(EmailOutput, GatewayError("connection reset", sys))

    result = workflow.run(_email_document())

    assert result.failed_stage == "EmailAgent"
    assert result.error == "connection reset"
    assert result.classification == {"format": "Email", "intent": "Complaint"}
    assert result.route is None
    assert gateway.called_with(RouteOutput) == []
    assert dispatcher.sent == []
    assert len(run_log) == 4
    assert run_log.entries()[-1].is_error


def test_router_failure_is_recorded(workflow, gateway, run_log):
    gateway.script(ClassificationOutput, {"format": "Email", "intent": "Complaint"})
    gateway.script(EmailOutput, {"sender": "jane@acme.com", "urgency": "high", "tone": "angry"})
    gateway.script(RouteOutput, GatewayError("rate limited", sys))

    result = workflow.run(_email_document())

    assert result.failed_stage == "ActionRouter"
    assert result.extraction["sender"] == "jane@acme.com"
    assert result.route is None
    assert len(run_log) == 6
    assert run_log.entries()[-1].output == {"error": "rate limited"}


def test_extractor_follows_classified_format(workflow, gateway):
    gateway.script(ClassificationOutput, {"format": "PDF", "intent": "Invoice"})
    gateway.script(
        PDFOutput,
        {
            "extracted_text": "Total due: 12,500.00",
            "is_invoice": True,
            "is_policy": False,
            "invoice_details": {"total_amount": 12500},
        },
    )
    gateway.script(RouteOutput, {"action_taken": "flag_compliance_risk", "details": "Large invoice"})

    result = workflow.run(Document(content="Total due: 12,500.00", declared_format=DocumentFormat.EMAIL))

    assert result.extraction_agent == "PDFAgent"
    assert result.extraction["flagged"] is True
    assert result.route["action_taken"] == "flag_compliance_risk"


def test_unknown_action_completes_run(workflow, gateway, dispatcher):
    gateway.script(ClassificationOutput, {"format": "Email", "intent": "RFQ"})
    gateway.script(EmailOutput, {"urgency": "low", "tone": "polite"})
    gateway.script(RouteOutput, {"action_taken": "archive"})

    result = workflow.run(_email_document())

    assert result.succeeded
    assert result.route["action_taken"] == "no_action_determined"
    assert dispatcher.sent == []


def test_log_accumulates_across_runs_until_cleared(workflow, gateway, run_log):
    for _ in range(2):
        gateway.script(ClassificationOutput, {"format": "JSON", "intent": "RFQ"})
        gateway.script(RouteOutput, {"action_taken": "log_and_close"})

    workflow.run(_json_document())
    first_run = run_log.entries()
    workflow.run(_json_document())

    entries = run_log.entries()
    assert len(first_run) == 6
    assert len(entries) == 12
    assert entries[:6] == first_run

    gateway.script(ClassificationOutput, GatewayError("down", sys))
    workflow.run(_json_document())
    assert len(run_log) == 14

    assert workflow.clear_log() == 14
    assert len(run_log) == 0


def test_workflow_owns_a_log_by_default(gateway, dispatcher):
    workflow = DocumentRoutingWorkflow(gateway=gateway, dispatcher=dispatcher)
    gateway.script(ClassificationOutput, GatewayError("down", sys))

    workflow.run(_email_document())

    assert len(workflow.run_log) == 2


def test_blank_document_is_rejected():
    with pytest.raises(ValidationError):
        Document(content="   ", declared_format=DocumentFormat.EMAIL)
