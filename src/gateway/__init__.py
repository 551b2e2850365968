"""
Gateway Package

- llm_gateway: InferenceGateway protocol and the LangChain-backed LLMGateway
"""

from src.gateway.llm_gateway import InferenceGateway, LLMGateway

__all__ = [
    "InferenceGateway",
    "LLMGateway",
]
