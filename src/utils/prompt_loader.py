import sys
from pathlib import Path
from typing import Optional

from langchain_core.prompts import ChatPromptTemplate

from src.config.exception import AppException
from src.config.logger import setup_logger

logger = setup_logger("PromptManager", "prompt_manager.log")

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

DEFAULT_PROMPT = (
    "You are a helpful assistant that analyzes business documents. "
    "Respond with a single JSON object matching this JSON schema:\n{output_schema}"
)


class PromptManager:
    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = Path(prompts_dir) if prompts_dir else PROMPTS_DIR

    def load_prompt(self, name: str) -> str:
        """
        Load a system prompt from the prompts directory.

        Args:
            name (str): File name of the prompt, e.g. "classifier_prompt.txt".

        Returns:
            str: The prompt text. Falls back to a generic prompt if the file is missing.
        """
        prompt_path = self.prompts_dir / name
        try:
            if not prompt_path.exists():
                logger.warning(f"Prompt file not found: {prompt_path}. Using default prompt.")
                return DEFAULT_PROMPT

            with open(prompt_path, "r", encoding="utf-8") as file:
                prompt_text = file.read().strip()
                logger.debug(f"Prompt loaded from: {prompt_path}")
                return prompt_text

        except Exception as e:
            logger.error(f"Error while loading prompt file {prompt_path}: {e}")
            raise AppException(e, sys)

    def build_template(self, name: str, human_template: str) -> ChatPromptTemplate:
        """Pair a system prompt file with the human message template of an agent"""
        return ChatPromptTemplate.from_messages([
            ("system", self.load_prompt(name)),
            ("human", human_template),
        ])
