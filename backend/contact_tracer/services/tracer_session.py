"""Tracer Session: the process-wide ContactTracer and its command history.

Invariants:
    - One TracerSession per process; routes receive it via Depends(get_tracer_session)
    - The tracer's threshold comes from Settings at first use

Design Decisions:
    - Module-level singleton (ADR: single-writer, single-process service; state
      lives in memory only)
    - Tests override the dependency instead of touching the singleton
"""

import logging
from dataclasses import dataclass

from contact_tracer.config import get_settings
from contact_tracer.core.contact_tracer import ContactTracer
from contact_tracer.services.command_history import CommandHistory

logger = logging.getLogger(__name__)


@dataclass
class TracerSession:
    tracer: ContactTracer
    history: CommandHistory


def new_tracer_session(high_risk_threshold: float | None = None) -> TracerSession:
    threshold = (
        high_risk_threshold if high_risk_threshold is not None
        else get_settings().high_risk_threshold
    )
    tracer = ContactTracer(high_risk_threshold=threshold)
    return TracerSession(tracer=tracer, history=CommandHistory(tracer))


_session: TracerSession | None = None


def get_tracer_session() -> TracerSession:
    """FastAPI dependency; lazily creates the process session."""
    global _session
    if _session is None:
        _session = new_tracer_session()
        logger.info("Tracer session created")
    return _session
