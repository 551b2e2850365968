"""
Tools Package

Contains deterministic helpers used by the agents and entry points:
- schema_validator: Field/type checks and summaries for webhook JSON
- label_matcher: Fuzzy matching of model labels onto closed enums
- action_dispatcher: Simulated and HTTP downstream action dispatchers
- pdf_text: PDF text extraction for uploads
"""

from src.tools.label_matcher import LabelMatcher
from src.tools.action_dispatcher import (
    ActionDispatcher,
    SimulatedActionDispatcher,
    HttpActionDispatcher,
    build_dispatcher,
)

__all__ = [
    "LabelMatcher",
    "ActionDispatcher",
    "SimulatedActionDispatcher",
    "HttpActionDispatcher",
    "build_dispatcher",
]
