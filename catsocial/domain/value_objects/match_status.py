from __future__ import annotations

from enum import Enum


class MatchStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    # Deletion marker set: rejected, withdrawn or superseded by another approval
    CLOSED = "closed"
