"""Diagnostic event sinks for the parsing pipeline.

Each engine stage reports what it found (header fields, region bounds,
skipped rows) as a ``DiagnosticEvent``. Where those events go is decided by
the caller: the default sink forwards them to the standard ``logging``
module, tests and the viewer can collect them instead.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticEvent:
    """A single structured trace event emitted by a parsing stage."""
    stage: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    level: int = logging.DEBUG


DiagnosticSink = Callable[[DiagnosticEvent], None]


class LoggingSink:
    """Forward diagnostic events to a ``logging.Logger``."""

    def __init__(self, target: Optional[logging.Logger] = None):
        """
        Initialize the sink.

        Args:
            target: Logger to write to, defaults to this module's logger
        """
        self.logger = target or logger

    def __call__(self, event: DiagnosticEvent) -> None:
        if not self.logger.isEnabledFor(event.level):
            return
        if event.data:
            self.logger.log(event.level, "[%s] %s %s", event.stage, event.message, event.data)
        else:
            self.logger.log(event.level, "[%s] %s", event.stage, event.message)


class CollectingSink:
    """Keep diagnostic events in memory for later inspection."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def __call__(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def for_stage(self, stage: str) -> List[DiagnosticEvent]:
        """Return the events emitted by one stage, in order."""
        return [e for e in self.events if e.stage == stage]

    def clear(self):
        self.events.clear()


def null_sink(event: DiagnosticEvent) -> None:
    """Discard the event."""


def emit(
    sink: Optional[DiagnosticSink],
    stage: str,
    message: str,
    level: int = logging.DEBUG,
    **data: Any,
) -> None:
    """Build an event and hand it to ``sink`` if one is set."""
    if sink is None:
        return
    sink(DiagnosticEvent(stage=stage, message=message, data=data, level=level))
