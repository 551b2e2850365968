from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel
from src.gateway.llm_gateway import InferenceGateway, LLMGateway
from src.graph.state import ActionType, RouteDecision
from src.models.gateway_schema import RouteOutput
from src.tools.action_dispatcher import ActionDispatcher, SimulatedActionDispatcher
from src.utils.prompt_loader import PromptManager
from src.config.logger import setup_logger
from typing import Any, Optional
import json

logger = setup_logger("ActionRouterAgent", "action_router_agent.log")

ACTION_ENDPOINTS = {
    ActionType.CREATE_TICKET: "/crm/create_ticket",
    ActionType.ESCALATE_ISSUE: "/crm/escalate",
    ActionType.FLAG_COMPLIANCE_RISK: "/risk_alert/flag",
    ActionType.LOG_AND_CLOSE: "/crm/log_inquiry",
}

DEFAULT_DETAILS = {
    ActionType.CREATE_TICKET: "Simulated ticket creation for intent: {intent}",
    ActionType.ESCALATE_ISSUE: "Simulated escalation for intent: {intent}",
    ActionType.FLAG_COMPLIANCE_RISK: "Simulated compliance risk flagging for intent: {intent}",
    ActionType.LOG_AND_CLOSE: "Simulated logging of routine inquiry for intent: {intent}",
}


class ActionRouterAgent:
    """Decides the follow-up action for an extractor result and dispatches it"""

    def __init__(
        self,
        gateway: Optional[InferenceGateway] = None,
        dispatcher: Optional[ActionDispatcher] = None,
    ):
        logger.info("Initializing ActionRouterAgent")
        self.gateway = gateway or LLMGateway()
        self.dispatcher = dispatcher or SimulatedActionDispatcher()
        self.prompt_manager = PromptManager()
        self.prompt = self._create_prompt()

    def _create_prompt(self) -> ChatPromptTemplate:
        return self.prompt_manager.build_template(
            "action_router_prompt.txt",
            """Document Format: {format}
Business Intent: {intent}
Specialized Agent Output: {agent_output}

Decide the follow-up action.""",
        )

    def route(self, agent_output: Any, intent: str, format: str) -> RouteDecision:
        """
        Ask the gateway for an action and hand it to the dispatcher.

        Actions outside the four dispatchable ones, including an empty answer,
        end as ``no_action_determined`` without any dispatch.
        """
        logger.info(f"Action Router: routing {format} / {intent}...")

        payload = agent_output.model_dump(mode="json") if isinstance(agent_output, BaseModel) else agent_output

        output = self.gateway.invoke(
            self.prompt,
            {
                "format": format,
                "intent": intent,
                "agent_output": json.dumps(payload, default=str),
            },
            RouteOutput,
        )

        action = self._known_action(output.action_taken)
        if action is None:
            logger.warning(f"Gateway returned no dispatchable action: {output.action_taken!r}")
            return RouteDecision(
                action_taken=ActionType.NO_ACTION_DETERMINED,
                details=(
                    "AI did not determine a specific action from the defined list. "
                    f"AI output: {output.model_dump_json()}"
                ),
            )

        endpoint = ACTION_ENDPOINTS[action]
        confirmation = self.dispatcher.send(endpoint, payload)

        details = output.details or DEFAULT_DETAILS[action].format(intent=intent)
        decision = RouteDecision(action_taken=action, details=f"{details}. {confirmation}")

        logger.info(f"Action taken: {decision.action_taken.value} via {endpoint}")
        return decision

    def _known_action(self, action_taken: Optional[str]) -> Optional[ActionType]:
        if not action_taken:
            return None
        try:
            action = ActionType(action_taken.strip())
        except ValueError:
            return None
        return action if action in ACTION_ENDPOINTS else None
