from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Sequence


def random_token_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True, slots=True)
class Token:
    """A single colored piece.

    ``id`` only distinguishes pieces for presentation; matching looks at ``color`` alone.
    """
    id: str
    color: str


@dataclass(slots=True)
class TokenFactory:
    """Spawns fresh tokens with a uniformly random color from ``colors``."""
    colors: Sequence[str]
    id_factory: Callable[[], str] = field(default=random_token_id)

    def __post_init__(self) -> None:
        self.colors = list(self.colors)
        if len(self.colors) < 3:
            raise ValueError(f"At least three colors are required, got {len(self.colors)}")

    def create(self, rng: random.Random, color: str | None = None) -> Token:
        if color is None:
            color = rng.choice(self.colors)
        return Token(id=self.id_factory(), color=color)

    def create_many(self, rng: random.Random, count: int) -> List[Token]:
        return [self.create(rng) for _ in range(count)]
