from dataclasses import dataclass
from typing import Optional, Union

from crush.components.token import Token


@dataclass(frozen=True, slots=True)
class Empty:
    """A cell with no token (cleared and not yet refilled)."""


@dataclass(frozen=True, slots=True)
class Occupied:
    token: Token


Cell = Union[Empty, Occupied]

EMPTY = Empty()


def color_of(cell: Cell) -> Optional[str]:
    if isinstance(cell, Occupied):
        return cell.token.color
    return None
