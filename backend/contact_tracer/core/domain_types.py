"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - PersonId, LocationId wrap one-based positive ints, never reused within a process
    - Status booleans surface at boundaries as the tokens "true" / "false"
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PersonId = NewType("PersonId", int)
LocationId = NewType("LocationId", int)


# ─── Constants ───────────────────────────────────────────────────

FIRST_ID = 1
DEFAULT_HIGH_RISK_THRESHOLD = 0.6   # infected visitor ratio must exceed this
DATE_FORMAT = "%Y-%m-%d"            # yyyy-MM-dd, matched strictly


# ─── Enums ───────────────────────────────────────────────────────

class EntityKind(str, Enum):
    """Registry record kinds used in errors and change notifications."""
    PERSON = "person"
    LOCATION = "location"
    VISIT = "visit"


class ChangeKind(str, Enum):
    """Structural change reported to registry/index subscribers."""
    ADDED = "added"
    REMOVED = "removed"
    REPLACED = "replaced"
    RESET = "reset"


class StatusToken(str, Enum):
    """String form of quarantine/infection booleans at the persistence boundary."""
    TRUE = "true"
    FALSE = "false"
