from pydantic import BaseModel
from typing import Dict, Any, Optional


class RunOutput(BaseModel):
    """Result of one pipeline run as returned to callers"""

    processing_timestamp: str
    processing_duration_seconds: float
    document_info: Dict[str, Any]
    classification: Optional[Dict[str, Any]] = None
    extraction_agent: Optional[str] = None
    extraction: Optional[Dict[str, Any]] = None
    route: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    failed_stage: Optional[str] = None
    agent_execution_trace: Dict[str, Dict[str, Any]] = {}

    @property
    def succeeded(self) -> bool:
        return self.error is None

    class Config:
        json_schema_extra = {
            "example": {
                "processing_timestamp": "2025-01-29T10:15:32Z",
                "processing_duration_seconds": 3.2,
                "document_info": {
                    "declared_format": "JSON",
                    "source_name": None,
                    "content_length": 58,
                },
                "classification": {"format": "JSON", "intent": "RFQ"},
                "extraction_agent": "JSONAgent",
                "extraction": {
                    "is_valid": True,
                    "anomalies": [],
                    "total_keys": 3,
                    "sample_values": {"id": 1, "amount": 50.5, "timestamp": "2024-01-01T00:00:00Z"},
                },
                "route": {
                    "action_taken": "create_ticket",
                    "details": "Ticket created for RFQ. Simulated /crm/create_ticket call. Data payload: {...}",
                },
                "error": None,
                "failed_stage": None,
                "agent_execution_trace": {
                    "classifier": {"duration_ms": 812.4, "status": "success"},
                },
            }
        }
