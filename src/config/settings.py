import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    """Runtime configuration read from the environment / .env file"""

    groq_api_key: Optional[str] = None
    llm_model: str = "openai/gpt-oss-120b"
    llm_temperature: float = 0.1

    log_dir: str = "logs"
    log_level: str = "INFO"

    # "simulated" never leaves the process, "http" posts to ACTION_BASE_URL
    action_dispatch_mode: str = "simulated"
    action_base_url: Optional[str] = None
    action_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY"),
            llm_model=os.getenv("LLM_MODEL", "openai/gpt-oss-120b"),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.1")),
            log_dir=os.getenv("LOG_DIR", "logs"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            action_dispatch_mode=os.getenv("ACTION_DISPATCH_MODE", "simulated").lower(),
            action_base_url=os.getenv("ACTION_BASE_URL"),
            action_timeout_seconds=float(os.getenv("ACTION_TIMEOUT_SECONDS", "10")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
