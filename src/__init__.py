"""
Document Triage AI - Main Source Package

This package contains the core components for document triage and action routing:
- agents: Classifier, format-specific extractors (Email, JSON, PDF) and action router
- config: Settings, logging and exception handling
- gateway: Inference gateway over a LangChain chat model
- graph: LangGraph workflow and state models
- memory: Append-only run log
- models: Gateway output shapes and run output schema
- tools: Schema validation, label matching, action dispatch and PDF text
- utils: Prompt loading
"""

__version__ = "1.0.0"
