"""
Observability & Audit Layer

RESPONSIBILITY: Recording what the pipeline dropped, ran and published.
OUTPUTS: AuditLog entries, event counters.

WHAT THIS LAYER MUST NOT DO:
============================
- Modify pipeline behavior
- Filter or interpret events (only record them)
- Raise on anything it records

Diagnostics also go to the stdlib `logging` module; the library never
configures handlers, hosts do.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from ..contracts.base import Error


class AuditEventType(Enum):
    """Events recorded by the pipeline."""
    GRAPH_REBUILT = "graph_rebuilt"
    EDGE_SKIPPED = "edge_skipped"
    LAYOUT_STARTED = "layout_started"
    LAYOUT_CONVERGED = "layout_converged"
    LAYOUT_STEP_CAP_REACHED = "layout_step_cap_reached"
    LAYOUT_CANCELLED = "layout_cancelled"
    NODE_EXCLUDED = "node_excluded"
    EDGE_DROPPED = "edge_dropped"
    SNAPSHOT_PUBLISHED = "snapshot_published"
    INPUT_IGNORED = "input_ignored"
    SIZE_FALLBACK = "size_fallback"


@dataclass(frozen=True)
class AuditEntry:
    """Immutable audit record."""
    sequence: int
    event_type: AuditEventType
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    error: Optional[Error] = None

    def context_value(self, key: str) -> Optional[str]:
        for k, v in self.context:
            if k == key:
                return v
        return None


class AuditLog:
    """
    Append-only collector of pipeline events.

    Entries are never modified once collected.
    """

    def __init__(self, name: str = "graphview"):
        self._name = name
        self._entries: List[AuditEntry] = []
        self._counts: Dict[AuditEventType, int] = {}
        self._sequence: int = 0

    def record(
        self,
        event_type: AuditEventType,
        message: str,
        context: Optional[Mapping[str, object]] = None,
        error: Optional[Error] = None
    ) -> AuditEntry:
        """Record an event (append-only)."""
        self._sequence += 1
        entry = AuditEntry(
            sequence=self._sequence,
            event_type=event_type,
            message=message,
            context=tuple((k, str(v)) for k, v in sorted((context or {}).items())),
            error=error
        )
        self._entries.append(entry)
        self._counts[event_type] = self._counts.get(event_type, 0) + 1
        return entry

    def entries(self, event_type: Optional[AuditEventType] = None) -> List[AuditEntry]:
        """Get entries, optionally filtered by type."""
        if event_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.event_type == event_type]

    def count(self, event_type: AuditEventType) -> int:
        return self._counts.get(event_type, 0)

    def clear(self):
        self._entries.clear()
        self._counts.clear()

    @property
    def name(self) -> str:
        return self._name

    @property
    def entry_count(self) -> int:
        return len(self._entries)


__all__ = [
    'AuditEventType',
    'AuditEntry',
    'AuditLog',
]
