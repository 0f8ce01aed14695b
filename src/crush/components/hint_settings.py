from dataclasses import dataclass

from crush.constants import HINT_DELAY


@dataclass(slots=True)
class HintSettings:
    """Player-facing hint toggle and the idle time before a hint appears."""
    enabled: bool = True
    delay: float = HINT_DELAY
