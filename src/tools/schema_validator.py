"""
Deterministic checks for webhook payloads.

Type names follow JSON's primitive vocabulary (number, string, boolean, object)
so anomalies read the same regardless of how the payload was produced.
"""

from typing import Any, Dict, List, Mapping

from src.config.logger import setup_logger

logger = setup_logger("SchemaValidator", "schema_validator.log")

WEBHOOK_SCHEMA: Dict[str, str] = {
    "id": "number",
    "amount": "number",
    "timestamp": "string",
}

SAMPLE_SIZE = 3


def primitive_type_name(value: Any) -> str:
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def validate(parsed: Mapping[str, Any], required_schema: Mapping[str, str]) -> List[str]:
    """
    Check ``parsed`` against a field -> type-name contract.

    Fields are checked in schema declaration order; a field produces at most one
    anomaly (missing, or present with the wrong type).
    """
    anomalies: List[str] = []

    for field, expected_type in required_schema.items():
        if field not in parsed:
            anomalies.append(f"Missing field: {field}")
            continue

        actual_type = primitive_type_name(parsed[field])
        if actual_type != expected_type:
            anomalies.append(
                f"Type mismatch for '{field}': expected {expected_type}, got {actual_type}"
            )

    logger.debug(f"Schema validation produced {len(anomalies)} anomalies")
    return anomalies


def summarize(parsed: Mapping[str, Any]) -> Dict[str, Any]:
    """Count the keys and keep the first few key/value pairs as a sample"""
    keys = list(parsed.keys())
    return {
        "total_keys": len(keys),
        "sample_values": {key: parsed[key] for key in keys[:SAMPLE_SIZE]},
    }
