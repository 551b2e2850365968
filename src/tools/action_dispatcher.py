"""
Downstream action dispatchers.

The router hands every decided action to a dispatcher together with the
extractor output. The simulated dispatcher only reports what it would send;
the HTTP dispatcher posts the payload to a real service.
"""

from typing import Any, Optional, Protocol
import json
import sys

import requests

from src.config.settings import Settings, get_settings
from src.config.logger import setup_logger
from src.config.exception import AppException

logger = setup_logger("ActionDispatcher", "action_dispatcher.log")


class ActionDispatcher(Protocol):
    def send(self, endpoint: str, payload: Any) -> str:
        ...


def _payload_text(payload: Any) -> str:
    return json.dumps(payload, default=str)


class SimulatedActionDispatcher:
    """Logs the call and echoes the payload back; nothing leaves the process"""

    def send(self, endpoint: str, payload: Any) -> str:
        logger.info(f"Simulating REST call to {endpoint}")
        logger.debug(f"Simulated payload for {endpoint}: {_payload_text(payload)}")
        return f"Simulated {endpoint} call. Data payload: {_payload_text(payload)}"


class HttpActionDispatcher:
    """POSTs the payload as JSON to ``base_url + endpoint``"""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, endpoint: str, payload: Any) -> str:
        url = f"{self.base_url}{endpoint}"
        logger.info(f"Dispatching action to {url}")
        try:
            response = self.session.post(
                url,
                data=_payload_text(payload),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Action dispatch to {url} failed: {e}")
            raise AppException(f"Action dispatch to {endpoint} failed: {e}", sys)

        return f"Sent {endpoint} call (HTTP {response.status_code}). Data payload: {_payload_text(payload)}"


def build_dispatcher(settings: Optional[Settings] = None):
    """Pick the dispatcher named by ACTION_DISPATCH_MODE"""
    settings = settings or get_settings()

    if settings.action_dispatch_mode == "http":
        if not settings.action_base_url:
            raise AppException("ACTION_BASE_URL is required when ACTION_DISPATCH_MODE=http", sys)
        return HttpActionDispatcher(settings.action_base_url, settings.action_timeout_seconds)

    if settings.action_dispatch_mode != "simulated":
        logger.warning(f"Unknown ACTION_DISPATCH_MODE '{settings.action_dispatch_mode}', using simulated")
    return SimulatedActionDispatcher()
