"""
Utils Package

Contains utility functions:
- prompt_loader: PromptManager for loading prompt files into chat templates
- documents: File extension to format mapping and document loading
"""

from src.utils.prompt_loader import PromptManager

__all__ = [
    "PromptManager",
]
