from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from crush.components.cell import EMPTY, Cell, Occupied, color_of
from crush.components.token import Token


@dataclass(slots=True)
class Board:
    """Square grid of cells stored flat in row-major order (index = row * size + col)."""
    size: int
    cells: List[Cell] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.size < 3:
            raise ValueError(f"Board size must be at least 3, got {self.size}")
        if not self.cells:
            self.cells = [EMPTY] * (self.size * self.size)
        elif len(self.cells) != self.size * self.size:
            raise ValueError(
                f"Board of size {self.size} needs {self.size * self.size} cells, got {len(self.cells)}"
            )

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[self.check_index(index)]

    def check_index(self, index: int) -> int:
        if not 0 <= index < len(self.cells):
            raise IndexError(f"Cell index {index} outside board of {len(self.cells)} cells")
        return index

    def index(self, row: int, col: int) -> int:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Position ({row}, {col}) outside {self.size}x{self.size} board")
        return row * self.size + col

    def row_col(self, index: int) -> Tuple[int, int]:
        return divmod(self.check_index(index), self.size)

    def color_at(self, index: int) -> Optional[str]:
        return color_of(self[index])

    def token_at(self, index: int) -> Optional[Token]:
        cell = self[index]
        if isinstance(cell, Occupied):
            return cell.token
        return None

    def tokens(self) -> List[Token]:
        return [cell.token for cell in self.cells if isinstance(cell, Occupied)]

    def colors(self) -> List[Optional[str]]:
        return [color_of(cell) for cell in self.cells]

    def has_empty(self) -> bool:
        return any(not isinstance(cell, Occupied) for cell in self.cells)

    def copy(self) -> Board:
        return Board(size=self.size, cells=list(self.cells))


@dataclass(slots=True)
class BoardHolder:
    """Component attaching the live Board value to the board entity."""
    board: Board
