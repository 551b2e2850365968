"""
Inference gateway backed by a LangChain chat model.

The agents only depend on the ``InferenceGateway`` protocol, so tests can
substitute a scripted gateway and production can swap the chat model.
"""

# from langchain_openai import ChatOpenAI
from langchain_groq import ChatGroq
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import ValidationError
from typing import Any, Dict, Optional, Protocol, Type, TypeVar
import json
import re
import sys

from src.config.settings import get_settings
from src.config.logger import setup_logger
from src.config.exception import GatewayError
from src.models.gateway_schema import GatewayOutput

logger = setup_logger("LLMGateway", "llm_gateway.log")

T = TypeVar("T", bound=GatewayOutput)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class InferenceGateway(Protocol):
    def invoke(
        self,
        prompt: ChatPromptTemplate,
        variables: Dict[str, Any],
        output_model: Type[T],
    ) -> T:
        ...


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


class LLMGateway:
    """Runs a prompt through a chat model and parses a JSON object out of the reply"""

    def __init__(self, llm: Optional[BaseChatModel] = None):
        if llm is None:
            settings = get_settings()
            logger.info(f"Initializing ChatGroq gateway with model {settings.llm_model}")
            llm = ChatGroq(
                model=settings.llm_model,
                temperature=settings.llm_temperature,
                groq_api_key=settings.groq_api_key,
            )
        self.llm = llm

    def invoke(
        self,
        prompt: ChatPromptTemplate,
        variables: Dict[str, Any],
        output_model: Type[T],
    ) -> T:
        bound = dict(variables)
        bound["output_schema"] = json.dumps(output_model.model_json_schema())

        try:
            messages = prompt.format_messages(**bound)
            response = self.llm.invoke(messages)
        except Exception as e:
            logger.error(f"Gateway call failed: {e}")
            raise GatewayError(f"Inference gateway call failed: {e}", sys)

        content = response.content if isinstance(response.content, str) else str(response.content)
        logger.debug(f"Gateway raw response: {content[:500]}")

        try:
            parsed = json.loads(_strip_code_fence(content))
        except json.JSONDecodeError as e:
            logger.error(f"Gateway returned non-JSON content: {e}")
            raise GatewayError(f"Inference gateway returned invalid JSON: {e}", sys)

        if not isinstance(parsed, dict):
            raise GatewayError(
                f"Inference gateway returned {type(parsed).__name__}, expected a JSON object", sys
            )

        try:
            return output_model.model_validate(parsed)
        except ValidationError as e:
            logger.error(f"Gateway output does not fit {output_model.__name__}: {e}")
            raise GatewayError(f"Inference gateway output does not fit {output_model.__name__}", sys)
