from langchain_core.prompts import ChatPromptTemplate
from src.gateway.llm_gateway import InferenceGateway, LLMGateway
from src.graph.state import PDFExtraction, InvoiceDetails, PolicyDetails, LineItem
from src.models.gateway_schema import PDFOutput
from src.utils.prompt_loader import PromptManager
from src.config.logger import setup_logger
from typing import Optional

logger = setup_logger("PDFAgent", "pdf_agent.log")

# Invoices strictly above this total are flagged
INVOICE_FLAG_THRESHOLD = 10000


def compute_flagged(extraction: PDFExtraction) -> bool:
    """Flag large invoices and policies that mention GDPR or FDA"""
    invoice = extraction.invoice_details
    if extraction.is_invoice and invoice and invoice.total_amount is not None:
        if invoice.total_amount > INVOICE_FLAG_THRESHOLD:
            return True

    policy = extraction.policy_details
    if extraction.is_policy and policy:
        if policy.mentions_gdpr or policy.mentions_fda:
            return True

    return False


class PDFAgent:
    """Extracts invoice and policy details from PDF text"""

    def __init__(self, gateway: Optional[InferenceGateway] = None):
        logger.info("Initializing PDFAgent")
        self.gateway = gateway or LLMGateway()
        self.prompt_manager = PromptManager()
        self.prompt = self._create_prompt()

    def _create_prompt(self) -> ChatPromptTemplate:
        return self.prompt_manager.build_template(
            "pdf_extraction_prompt.txt",
            "PDF document: {source_name}\n\nDocument content:\n{pdf_content}",
        )

    def extract(self, pdf_content: str, source_name: Optional[str] = None) -> PDFExtraction:
        logger.info("PDF Agent: Starting extraction...")

        output = self.gateway.invoke(
            self.prompt,
            {"pdf_content": pdf_content, "source_name": source_name or "uploaded document"},
            PDFOutput,
        )

        extraction = self._parse_extraction(output)
        if output.flagged is not None and output.flagged != extraction.flagged:
            logger.debug(f"Discarding model flag {output.flagged}, computed {extraction.flagged}")

        logger.info(
            f"PDF extracted (invoice: {extraction.is_invoice}, policy: {extraction.is_policy}, "
            f"flagged: {extraction.flagged})"
        )
        return extraction

    def _parse_extraction(self, output: PDFOutput) -> PDFExtraction:
        invoice_details = None
        if output.invoice_details is not None:
            line_items = None
            if output.invoice_details.line_items is not None:
                line_items = [
                    LineItem(description=item.description or "", amount=item.amount or 0.0)
                    for item in output.invoice_details.line_items
                ]
            invoice_details = InvoiceDetails(
                total_amount=output.invoice_details.total_amount,
                line_items=line_items,
            )

        policy_details = None
        if output.policy_details is not None:
            policy_details = PolicyDetails(
                mentions_gdpr=output.policy_details.mentions_gdpr,
                mentions_fda=output.policy_details.mentions_fda,
            )

        extraction = PDFExtraction(
            extracted_text=output.extracted_text or "",
            is_invoice=bool(output.is_invoice),
            is_policy=bool(output.is_policy),
            invoice_details=invoice_details,
            policy_details=policy_details,
        )
        return extraction.model_copy(update={"flagged": compute_flagged(extraction)})
