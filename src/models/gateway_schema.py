"""
Output shapes requested from the inference gateway.

Every field is optional: the model's answer is best-effort and the agents
apply their own defaults before building the strict result types.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Any, Optional


class GatewayOutput(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ClassificationOutput(GatewayOutput):
    format: Optional[str] = Field(None, description="One of: Email, JSON, PDF.")
    intent: Optional[str] = Field(
        None, description="One of: RFQ, Complaint, Invoice, Regulation, Fraud Risk."
    )


class EmailOutput(GatewayOutput):
    sender: Optional[str] = Field(None, description="Email address of the sender.")
    urgency: Optional[str] = Field(None, description="Urgency level, e.g. high, medium, low.")
    issue_request: Optional[str] = Field(None, description="Brief description of the issue or request.")
    tone: Optional[str] = Field(None, description="Tone, e.g. escalation, polite, threatening.")
    action_triggered: Optional[str] = Field(
        None, description="Action suggested by the email content, e.g. escalate to CRM."
    )


class JSONCheckOutput(GatewayOutput):
    is_valid: Optional[bool] = None
    anomalies: Optional[List[str]] = Field(None, description="List of problems found.")
    total_keys: Optional[int] = None
    sample_values: Optional[Dict[str, Any]] = None


class LineItemOutput(GatewayOutput):
    description: Optional[str] = None
    amount: Optional[float] = None


class InvoiceDetailsOutput(GatewayOutput):
    total_amount: Optional[float] = Field(None, description="Total amount of the invoice, if present.")
    line_items: Optional[List[LineItemOutput]] = None


class PolicyDetailsOutput(GatewayOutput):
    mentions_gdpr: Optional[bool] = None
    mentions_fda: Optional[bool] = None


class PDFOutput(GatewayOutput):
    extracted_text: Optional[str] = Field(None, description="Text content of the document.")
    is_invoice: Optional[bool] = None
    is_policy: Optional[bool] = None
    invoice_details: Optional[InvoiceDetailsOutput] = None
    policy_details: Optional[PolicyDetailsOutput] = None
    flagged: Optional[bool] = None


class RouteOutput(GatewayOutput):
    action_taken: Optional[str] = Field(
        None,
        description="One of: log_and_close, create_ticket, escalate_issue, flag_compliance_risk.",
    )
    details: Optional[str] = Field(None, description="Details about the action taken.")
