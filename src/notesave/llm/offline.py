# src/notesave/llm/offline.py

from __future__ import annotations

from ..core.models import SuggestedStep
from ..errors import SuggestionFailed


class OfflineSuggestionClient:
    """
    Suggestion provider used when no external API is configured.

    Every call fails with a readable reason, so the edit flow shows a notice
    instead of silently doing nothing.
    """

    def __init__(self, reason: str = "AI suggestions are not configured.") -> None:
        self.reason = reason

    async def suggest(self, task_title: str) -> list[SuggestedStep]:
        raise SuggestionFailed(self.reason)
