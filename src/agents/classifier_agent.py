from langchain_core.prompts import ChatPromptTemplate
from src.gateway.llm_gateway import InferenceGateway, LLMGateway
from src.graph.state import ClassificationResult, DocumentFormat, Intent
from src.models.gateway_schema import ClassificationOutput
from src.tools.label_matcher import LabelMatcher
from src.utils.prompt_loader import PromptManager
from src.config.logger import setup_logger
from src.config.exception import GatewayError
from typing import Optional
import sys

logger = setup_logger("ClassifierAgent", "classifier_agent.log")

INTENT_ALIASES = {
    "request for quote": Intent.RFQ,
    "request for quotation": Intent.RFQ,
    "quote request": Intent.RFQ,
    "fraud": Intent.FRAUD_RISK,
    "compliance": Intent.REGULATION,
}

FORMAT_ALIASES = {
    "mail": DocumentFormat.EMAIL,
    "e-mail": DocumentFormat.EMAIL,
    "webhook": DocumentFormat.JSON,
}


class ClassifierAgent:
    """Determines document format and business intent"""

    def __init__(self, gateway: Optional[InferenceGateway] = None):
        logger.info("Initializing ClassifierAgent")
        self.gateway = gateway or LLMGateway()
        self.prompt_manager = PromptManager()
        self.label_matcher = LabelMatcher()
        self.prompt = self._create_prompt()

    def _create_prompt(self) -> ChatPromptTemplate:
        return self.prompt_manager.build_template(
            "classifier_prompt.txt",
            "Classify the following document.\n\nDeclared format: {document_format}\n\nContent:\n{document_content}",
        )

    def classify(self, content: str, declared_format: DocumentFormat) -> ClassificationResult:
        """
        Classify a document with a single gateway round-trip.

        The returned format is passed through as the model states it, even when it
        differs from ``declared_format``; only a missing format falls back to it.
        """
        logger.info(f"Classifier Agent: classifying {declared_format.value} document...")

        output = self.gateway.invoke(
            self.prompt,
            {"document_format": declared_format.value, "document_content": content},
            ClassificationOutput,
        )

        doc_format = self.label_matcher.match(output.format, DocumentFormat, FORMAT_ALIASES)
        if doc_format is None:
            if output.format:
                logger.warning(f"Unrecognized format '{output.format}', keeping declared {declared_format.value}")
            doc_format = declared_format
        elif doc_format != declared_format:
            logger.warning(f"Classifier format {doc_format.value} differs from declared {declared_format.value}")

        intent = self.label_matcher.match(output.intent, Intent, INTENT_ALIASES)
        if intent is None:
            raise GatewayError(f"Classifier returned no recognizable intent: {output.intent!r}", sys)

        result = ClassificationResult(format=doc_format, intent=intent)
        logger.info(f"Classified as {result.format.value} - {result.intent.value}")
        return result
