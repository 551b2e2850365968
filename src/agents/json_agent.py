from langchain_core.prompts import ChatPromptTemplate
from src.gateway.llm_gateway import InferenceGateway, LLMGateway
from src.graph.state import JSONExtraction
from src.models.gateway_schema import JSONCheckOutput
from src.tools.schema_validator import WEBHOOK_SCHEMA, primitive_type_name, summarize, validate
from src.utils.prompt_loader import PromptManager
from src.config.logger import setup_logger
from src.config.exception import ParseError
from typing import Any, Optional
import json
import sys

logger = setup_logger("JSONAgent", "json_agent.log")

INVALID_SYNTAX = "Invalid JSON syntax"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_payload(raw: str) -> Any:
    """Parse strict JSON (NaN and Infinity are rejected)"""
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ParseError(f"{INVALID_SYNTAX}: {e}", sys)


class JSONAgent:
    """Validates webhook JSON against the expected contract and summarizes it"""

    def __init__(self, gateway: Optional[InferenceGateway] = None):
        logger.info("Initializing JSONAgent")
        self.gateway = gateway
        self.prompt_manager = PromptManager()
        self.prompt = self._create_prompt()

    def _create_prompt(self) -> ChatPromptTemplate:
        return self.prompt_manager.build_template(
            "json_validation_prompt.txt",
            "Webhook payload:\n\n{webhook_data}",
        )

    def extract(self, webhook_data: str) -> JSONExtraction:
        """
        Validate a raw webhook payload.

        Well-formed JSON is checked deterministically. Malformed text goes to the
        gateway for a description of what is wrong; its anomalies follow a leading
        "Invalid JSON syntax" and the result is never valid.
        """
        logger.info("JSON Agent: Validating webhook payload...")

        try:
            parsed = parse_payload(webhook_data)
        except ParseError as e:
            logger.warning(f"{e.message}. Falling back to gateway")
            return self._fallback(webhook_data)

        if isinstance(parsed, list):
            # Arrays are checked as objects keyed by index
            parsed = {str(index): value for index, value in enumerate(parsed)}
        elif not isinstance(parsed, dict):
            found = "null" if parsed is None else primitive_type_name(parsed)
            logger.warning(f"Top-level JSON value is {found}, not an object. Falling back to gateway")
            return self._fallback(webhook_data)

        anomalies = validate(parsed, WEBHOOK_SCHEMA)
        summary = summarize(parsed)

        result = JSONExtraction(
            is_valid=not anomalies,
            anomalies=anomalies,
            total_keys=summary["total_keys"],
            sample_values=summary["sample_values"],
        )
        logger.info(f"Validation complete (valid: {result.is_valid}, anomalies: {len(anomalies)})")
        return result

    def _fallback(self, webhook_data: str) -> JSONExtraction:
        # Created on first use; well-formed payloads never need a gateway
        if self.gateway is None:
            self.gateway = LLMGateway()

        output = self.gateway.invoke(
            self.prompt,
            {"webhook_data": webhook_data},
            JSONCheckOutput,
        )

        anomalies = [INVALID_SYNTAX] + list(output.anomalies or [])
        logger.info(f"Gateway reported {len(anomalies) - 1} anomalies for malformed payload")
        return JSONExtraction(is_valid=False, anomalies=anomalies)
