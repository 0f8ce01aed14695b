from __future__ import annotations

import itertools
from typing import Callable, List, Optional, Sequence

from crush.components.board import Board
from crush.components.cell import EMPTY, Occupied
from crush.components.token import Token

LETTER_COLORS = {
    'R': 'red',
    'O': 'orange',
    'Y': 'yellow',
    'G': 'green',
    'B': 'blue',
    'P': 'purple',
}

STRIPE_COLORS = ('red', 'green', 'blue')


def counter_ids(prefix: str = "t") -> Callable[[], str]:
    """Deterministic id factory: t0, t1, t2, ..."""
    counter = itertools.count()
    return lambda: f"{prefix}{next(counter)}"


def board_from_colors(colors: Sequence[Optional[str]], size: int, ids: Callable[[], str] | None = None) -> Board:
    ids = ids or counter_ids("fx")
    cells = [EMPTY if color is None else Occupied(Token(id=ids(), color=color)) for color in colors]
    return Board(size=size, cells=cells)


def board_from_rows(rows: Sequence[str]) -> Board:
    """Build a board from letter rows; '.' marks an empty cell."""
    colors: List[Optional[str]] = []
    for row in rows:
        assert len(row) == len(rows), "Board rows must form a square"
        colors.extend(None if ch == '.' else LETTER_COLORS[ch] for ch in row)
    return board_from_colors(colors, len(rows))


def striped_colors(size: int) -> List[Optional[str]]:
    """Diagonal three-color stripes: no matches and no match-making swap."""
    return [STRIPE_COLORS[(row + col) % 3] for row in range(size) for col in range(size)]


def one_move_colors(size: int = 8) -> List[Optional[str]]:
    """Stripes with yellow at (0,0), (0,1) and (1,2): the only move swaps cells 2 and size + 2."""
    colors = striped_colors(size)
    for index in (0, 1, size + 2):
        colors[index] = 'yellow'
    return colors
