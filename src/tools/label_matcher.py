"""
Fuzzy matching of free-text model labels onto closed enums.
Uses rapidfuzz so "fraud-risk", "FraudRisk" or "request for quote" still resolve.
"""

from rapidfuzz import fuzz, process
from enum import Enum
from typing import Dict, Optional, Type
import re

from src.config.logger import setup_logger

logger = setup_logger("LabelMatcher", "label_matcher.log")


class LabelMatcher:
    """Resolves labels returned by the gateway to enum members"""

    def __init__(self, threshold: float = 85.0):
        """
        Args:
            threshold: Minimum similarity score (0-100) to accept a fuzzy match
        """
        self.threshold = threshold

    def _normalize_text(self, text: str) -> str:
        if not text:
            return ""
        # Split camel case, then collapse separators
        text = re.sub(r"(?<=[a-z])(?=[A-Z])", " ", text.strip())
        text = re.sub(r"[\s_\-]+", " ", text.lower())
        return text.strip()

    def match(
        self,
        label: Optional[str],
        enum_type: Type[Enum],
        aliases: Optional[Dict[str, Enum]] = None,
    ) -> Optional[Enum]:
        """
        Match a label to a member of ``enum_type``.

        Exact (normalized) matches on value, member name or alias win; otherwise
        the best fuzzy candidate above the threshold is used.

        Returns:
            The matched member, or None when nothing is close enough
        """
        if not label or not label.strip():
            return None

        candidates = self._candidates(enum_type, aliases or {})
        normalized = self._normalize_text(label)

        if normalized in candidates:
            return candidates[normalized]

        best = process.extractOne(
            normalized,
            list(candidates.keys()),
            scorer=fuzz.token_sort_ratio,
        )
        if best and best[1] >= self.threshold:
            member = candidates[best[0]]
            logger.debug(f"Fuzzy label match: '{label}' -> {member.value} (score: {best[1]:.1f})")
            return member

        logger.debug(f"No {enum_type.__name__} match for label '{label}'")
        return None

    def _candidates(self, enum_type: Type[Enum], aliases: Dict[str, Enum]) -> Dict[str, Enum]:
        candidates: Dict[str, Enum] = {}
        for member in enum_type:
            candidates[self._normalize_text(str(member.value))] = member
            candidates[self._normalize_text(member.name)] = member
        for alias, member in aliases.items():
            candidates[self._normalize_text(alias)] = member
        return candidates
