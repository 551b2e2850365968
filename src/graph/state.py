from typing import TypedDict, List, Optional, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone
from enum import Enum


class DocumentFormat(str, Enum):
    EMAIL = "Email"
    JSON = "JSON"
    PDF = "PDF"


class Intent(str, Enum):
    RFQ = "RFQ"
    COMPLAINT = "Complaint"
    INVOICE = "Invoice"
    REGULATION = "Regulation"
    FRAUD_RISK = "Fraud Risk"


class ActionType(str, Enum):
    LOG_AND_CLOSE = "log_and_close"
    CREATE_TICKET = "create_ticket"
    ESCALATE_ISSUE = "escalate_issue"
    FLAG_COMPLIANCE_RISK = "flag_compliance_risk"
    NO_ACTION_DETERMINED = "no_action_determined"
    UNKNOWN_ACTION_FROM_AI = "unknown_action_from_ai"


class StageAgent(str, Enum):
    CLASSIFIER = "Classifier"
    EMAIL_AGENT = "EmailAgent"
    JSON_AGENT = "JSONAgent"
    PDF_AGENT = "PDFAgent"
    ACTION_ROUTER = "ActionRouter"


PROCESSING_PLACEHOLDER = "Processing..."


class Document(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    declared_format: DocumentFormat
    source_name: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Document content must not be empty")
        return value


class ClassificationResult(BaseModel):
    format: DocumentFormat
    intent: Intent


class EmailExtraction(BaseModel):
    sender: str
    urgency: str
    issue_request: str
    tone: str
    action_triggered: Optional[str] = None


class JSONExtraction(BaseModel):
    is_valid: bool
    anomalies: List[str] = []
    total_keys: Optional[int] = None
    sample_values: Optional[Dict[str, Any]] = None


class LineItem(BaseModel):
    description: str
    amount: float


class InvoiceDetails(BaseModel):
    total_amount: Optional[float] = None
    line_items: Optional[List[LineItem]] = None


class PolicyDetails(BaseModel):
    mentions_gdpr: Optional[bool] = None
    mentions_fda: Optional[bool] = None


class PDFExtraction(BaseModel):
    extracted_text: str
    is_invoice: bool
    is_policy: bool
    invoice_details: Optional[InvoiceDetails] = None
    policy_details: Optional[PolicyDetails] = None
    flagged: bool = False


ExtractionResult = Union[EmailExtraction, JSONExtraction, PDFExtraction]


class RouteDecision(BaseModel):
    action_taken: ActionType
    details: str


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    agent: StageAgent
    input: Optional[Any] = None
    output: Any
    action: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return isinstance(self.output, dict) and "error" in self.output

    @property
    def is_placeholder(self) -> bool:
        return self.output == PROCESSING_PLACEHOLDER


class PipelineState(TypedDict):
    # Input
    document: Document

    # Classifier
    classification: Optional[ClassificationResult]

    # Format-specific extractor
    extraction_agent: Optional[StageAgent]
    extraction: Optional[ExtractionResult]

    # Action Router
    route: Optional[RouteDecision]

    # Failure
    error: Optional[str]
    failed_stage: Optional[StageAgent]

    # Metadata
    processing_timestamp: str
    processing_duration: float
    agent_execution_trace: Dict[str, Any]
