from langchain_core.prompts import ChatPromptTemplate
from src.gateway.llm_gateway import InferenceGateway, LLMGateway
from src.graph.state import EmailExtraction
from src.models.gateway_schema import EmailOutput
from src.utils.prompt_loader import PromptManager
from src.config.logger import setup_logger
from typing import Optional

logger = setup_logger("EmailAgent", "email_agent.log")

UNKNOWN = "unknown"


class EmailAgent:
    """Extracts sender, urgency, request and tone from emails"""

    def __init__(self, gateway: Optional[InferenceGateway] = None):
        logger.info("Initializing EmailAgent")
        self.gateway = gateway or LLMGateway()
        self.prompt_manager = PromptManager()
        self.prompt = self._create_prompt()

    def _create_prompt(self) -> ChatPromptTemplate:
        return self.prompt_manager.build_template(
            "email_extraction_prompt.txt",
            "Analyze the following email content:\n\n{email_content}",
        )

    def extract(self, email_content: str) -> EmailExtraction:
        logger.info("Email Agent: Starting extraction...")

        output = self.gateway.invoke(
            self.prompt,
            {"email_content": email_content},
            EmailOutput,
        )

        result = EmailExtraction(
            sender=output.sender or UNKNOWN,
            urgency=output.urgency or UNKNOWN,
            issue_request=output.issue_request or "",
            tone=output.tone or UNKNOWN,
            action_triggered=output.action_triggered or None,
        )

        logger.info(f"Email extracted (urgency: {result.urgency}, tone: {result.tone})")
        return result
