"""Readable aggregation.

Merges every readable currently held by a ``CapabilityRegistry`` into one
context document for the agent. Entries keep registration order. Values are
only structurally serialized; the aggregator never reshapes them.

When a token budget is configured and the combined snapshot does not fit, the
oldest entries are dropped first and a truncation marker takes their place at
the front of the snapshot.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field
from pydantic_core import to_jsonable_python

from agentic_ui.core.logging_config import get_logger

from .capabilities import CapabilityKind, CapabilityRegistry, ReadableEntry

logger = get_logger(__name__)

# Rough characters-per-token ratio used to estimate snapshot size.
CHARS_PER_TOKEN = 4

TRUNCATION_DESCRIPTION = "Context truncated"


class ReadableSnapshotItem(BaseModel):
    """One ``{description, value}`` item of the aggregated context."""

    description: str = Field(..., description="What the value represents")
    value: Any = Field(default=None, description="JSON-compatible state snapshot")

    def render(self) -> str:
        return f"{self.description}:\n{json.dumps(self.value, ensure_ascii=False, indent=2)}"


def estimate_tokens(item: ReadableSnapshotItem) -> int:
    """Estimate how many tokens an item costs in the context window."""
    return max(1, len(item.render()) // CHARS_PER_TOKEN)


class ReadableAggregator:
    """Builds the readable context document from a registry.

    Args:
        registry: The registry whose readables are aggregated.
        token_budget: Optional upper bound for the estimated token size of a
            snapshot. ``None`` disables truncation.
    """

    def __init__(self, registry: CapabilityRegistry, token_budget: Optional[int] = None) -> None:
        if token_budget is not None and token_budget < 1:
            raise ValueError("token_budget must be a positive integer")
        self._registry = registry
        self._token_budget = token_budget

    @property
    def token_budget(self) -> Optional[int]:
        return self._token_budget

    def snapshot(self, extra: Optional[Iterable[ReadableEntry]] = None) -> List[ReadableSnapshotItem]:
        """
        Snapshot all registered readables, in registration order.

        Args:
            extra: Additional readables to append after the registered ones
                (e.g. readables posted by a remote client with its request).

        Returns:
            The ordered snapshot, possibly truncated to the token budget.
        """
        entries: List[ReadableEntry] = list(self._registry.list(CapabilityKind.READABLE).values())
        if extra:
            entries.extend(extra)

        items = [
            ReadableSnapshotItem(description=entry.description, value=to_jsonable_python(entry.value, fallback=str))
            for entry in entries
        ]
        return self._fit_budget(items)

    def _fit_budget(self, items: List[ReadableSnapshotItem]) -> List[ReadableSnapshotItem]:
        if self._token_budget is None:
            return items

        costs = [estimate_tokens(item) for item in items]
        if sum(costs) <= self._token_budget:
            return items

        # Drop from the front (oldest) until the remainder plus the marker fits.
        start = 0
        while start < len(items) and sum(costs[start:]) + estimate_tokens(_truncation_marker(start)) > self._token_budget:
            start += 1

        marker = _truncation_marker(start)
        logger.warning(
            f"Readable snapshot exceeds token budget {self._token_budget}; omitted {start} oldest entr"
            f"{'y' if start == 1 else 'ies'}"
        )
        return [marker] + items[start:]

    def render(self, extra: Optional[Iterable[ReadableEntry]] = None) -> str:
        """Render the snapshot as the text block injected into the conversation."""
        items = self.snapshot(extra)
        if not items:
            return ""
        return "\n\n".join(item.render() for item in items)

    def as_dicts(self, extra: Optional[Iterable[ReadableEntry]] = None) -> List[Dict[str, Any]]:
        return [item.model_dump() for item in self.snapshot(extra)]


def _truncation_marker(omitted: int) -> ReadableSnapshotItem:
    return ReadableSnapshotItem(description=TRUNCATION_DESCRIPTION, value={"omitted_entries": omitted})
