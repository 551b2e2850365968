"""
Agents Package

Contains the pipeline stages:
- ClassifierAgent: Determines document format and business intent
- EmailAgent: Extracts sender, urgency, request and tone from emails
- JSONAgent: Validates and summarizes webhook JSON
- PDFAgent: Extracts invoice and policy details from PDFs
- ActionRouterAgent: Decides and dispatches the follow-up action
"""

from src.agents.classifier_agent import ClassifierAgent
from src.agents.email_agent import EmailAgent
from src.agents.json_agent import JSONAgent
from src.agents.pdf_agent import PDFAgent
from src.agents.action_router_agent import ActionRouterAgent

__all__ = [
    "ClassifierAgent",
    "EmailAgent",
    "JSONAgent",
    "PDFAgent",
    "ActionRouterAgent",
]
