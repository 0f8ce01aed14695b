from dataclasses import dataclass


@dataclass(slots=True)
class ResolutionState:
    """Tracks the in-progress resolution loop shared across systems."""

    processing: bool = False
    cascade_depth: int = 0
    elapsed: float = 0.0
    reason: str = ""
