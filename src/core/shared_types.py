"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "draw by insufficient material"
    RESIGNED = "resigned"

    @property
    def is_over(self) -> bool:
        return self != Status.IN_PROGRESS

    @property
    def has_winner(self) -> bool:
        return self in (Status.CHECKMATE, Status.RESIGNED)
