"""Deadlock recovery bookkeeping stored on the board entity."""
from dataclasses import dataclass
from enum import Enum, auto


class RecoveryPhase(Enum):
    STABLE = auto()
    RECOVERING = auto()


@dataclass(slots=True)
class RecoveryState:
    """Tracks the recovery state machine and what it has done so far."""
    phase: RecoveryPhase = RecoveryPhase.STABLE
    shuffles: int = 0
    last_attempts: int = 0
    generated_tiles: int = 0
