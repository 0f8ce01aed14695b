from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from crush.components.board import Board
from crush.components.cell import EMPTY, Cell, Occupied
from crush.components.token import Token, TokenFactory
from crush.constants import GRID_SIZE, MAX_REROLL_PASSES, MAX_SHUFFLE_ATTEMPTS, MIN_MATCH

logger = logging.getLogger(__name__)

ClearedEntry = Tuple[int, str]


@dataclass(frozen=True, slots=True)
class PotentialMatch:
    swap: Tuple[int, int]
    match: Tuple[int, ...]


class StepKind(Enum):
    CLEAR = auto()
    REFILL = auto()
    SHUFFLE = auto()
    STABLE = auto()


@dataclass(slots=True)
class StepResult:
    kind: StepKind
    board: Board
    cleared: List[ClearedEntry] = field(default_factory=list)
    spawned: List[int] = field(default_factory=list)


def check_for_matches(board: Board) -> List[int]:
    """Return every index lying in a horizontal or vertical run of MIN_MATCH or more equal colors.

    Each start position is tested against its next MIN_MATCH - 1 neighbours, so longer and
    crossing runs are covered by overlapping windows. The result is sorted ascending.
    """
    size = board.size
    colors = board.colors()
    matched: set[int] = set()
    # Horizontal windows
    for index in range(size * size):
        if index % size <= size - MIN_MATCH:
            window = [index + offset for offset in range(MIN_MATCH)]
            if _same_color(colors, window):
                matched.update(window)
    # Vertical windows
    for index in range(size * (size - MIN_MATCH + 1)):
        window = [index + offset * size for offset in range(MIN_MATCH)]
        if _same_color(colors, window):
            matched.update(window)
    return sorted(matched)


def _same_color(colors: List[Optional[str]], window: List[int]) -> bool:
    first = colors[window[0]]
    return first is not None and all(colors[idx] == first for idx in window[1:])


def is_adjacent(board: Board, a: int, b: int) -> bool:
    ar, ac = board.row_col(a)
    br, bc = board.row_col(b)
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def swap_cells(board: Board, a: int, b: int) -> Board:
    """Return a copy of board with the contents of cells a and b exchanged."""
    board.check_index(a)
    board.check_index(b)
    swapped = board.copy()
    swapped.cells[a], swapped.cells[b] = board.cells[b], board.cells[a]
    return swapped


def validate_swap(board: Board, a: int, b: int) -> Tuple[bool, Board]:
    """Swap two neighbouring cells on a copy and report whether the result holds a match.

    The swapped board is returned either way; the caller decides to commit or drop it.
    """
    if not is_adjacent(board, a, b):
        raise ValueError(f"Cells {a} and {b} are not horizontally or vertically adjacent")
    swapped = swap_cells(board, a, b)
    return bool(check_for_matches(swapped)), swapped


def clear_matches(board: Board, indices: Iterable[int]) -> Tuple[Board, List[ClearedEntry]]:
    """Empty the given cells and report (index, color) once for every token removed."""
    cleared_board = board.copy()
    cleared: List[ClearedEntry] = []
    for index in sorted(set(indices)):
        cell = cleared_board[index]
        if not isinstance(cell, Occupied):
            continue
        cleared.append((index, cell.token.color))
        cleared_board.cells[index] = EMPTY
    return cleared_board, cleared


def count_by_color(cleared: Iterable[ClearedEntry]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for _, color in cleared:
        counts[color] = counts.get(color, 0) + 1
    return counts


def blast_area(board: Board, index: int, radius: int = 1) -> Tuple[Board, List[ClearedEntry]]:
    """Clear the square of cells within radius of index, clipped at the board edges."""
    row, col = board.row_col(index)
    targets = [
        board.index(r, c)
        for r in range(max(0, row - radius), min(board.size, row + radius + 1))
        for c in range(max(0, col - radius), min(board.size, col + radius + 1))
    ]
    return clear_matches(board, targets)


def clear_color(board: Board, color: str) -> Tuple[Board, List[ClearedEntry]]:
    """Clear every token of one color, wherever it sits on the board."""
    return clear_matches(board, [idx for idx, cell_color in enumerate(board.colors()) if cell_color == color])


def apply_gravity_and_refill(board: Board, factory: TokenFactory, rng: random.Random) -> Tuple[Board, bool]:
    """Drop surviving tokens to the bottom of each column and spawn fresh ones above them.

    New tokens are not checked for matches; any run they form is found by the next scan.
    """
    refilled, spawned = _gravity_and_refill(board, factory, rng)
    return refilled, bool(spawned)


def _gravity_and_refill(board: Board, factory: TokenFactory, rng: random.Random) -> Tuple[Board, List[int]]:
    size = board.size
    refilled = board.copy()
    spawned: List[int] = []
    for col in range(size):
        survivors: List[Cell] = []
        for row in range(size):
            cell = board.cells[row * size + col]
            if isinstance(cell, Occupied):
                survivors.append(cell)
        missing = size - len(survivors)
        if not missing:
            continue
        column: List[Cell] = [Occupied(factory.create(rng)) for _ in range(missing)]
        column.extend(survivors)
        for row, cell in enumerate(column):
            refilled.cells[row * size + col] = cell
        spawned.extend(row * size + col for row in range(missing))
    return refilled, sorted(spawned)


def _candidate_swaps(size: int) -> Iterator[Tuple[int, int]]:
    # Horizontal pairs row by row, then vertical pairs column by column.
    for row in range(size):
        for col in range(size - 1):
            index = row * size + col
            yield index, index + 1
    for col in range(size):
        for row in range(size - 1):
            index = row * size + col
            yield index, index + size


def find_potential_match(board: Board) -> Optional[PotentialMatch]:
    """Return the first swap (in fixed scan order) that would produce a match, or None on stalemate."""
    for a, b in _candidate_swaps(board.size):
        if not (isinstance(board.cells[a], Occupied) and isinstance(board.cells[b], Occupied)):
            continue
        matches = check_for_matches(swap_cells(board, a, b))
        if matches:
            return PotentialMatch(swap=(a, b), match=tuple(matches))
    return None


def create_board(
    factory: TokenFactory,
    rng: random.Random,
    size: int = GRID_SIZE,
    *,
    ensure_solvable: bool = True,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> Board:
    """Fill a fresh board with random tokens that contains no matches.

    With ensure_solvable the board also offers at least one match-making swap; after
    max_attempts unsolvable fills a constructive layout is returned instead.
    """
    attempts = max_attempts if ensure_solvable else 1
    for _ in range(attempts):
        board = _fill_without_matches(factory, rng, size)
        if not ensure_solvable or find_potential_match(board) is not None:
            return board
    logger.warning("No solvable %dx%d board after %d fills; building one", size, size, attempts)
    return build_solvable_layout(factory, rng, size)


def _fill_without_matches(factory: TokenFactory, rng: random.Random, size: int) -> Board:
    board = Board(size=size, cells=[Occupied(token) for token in factory.create_many(rng, size * size)])
    for _ in range(MAX_REROLL_PASSES):
        matches = check_for_matches(board)
        if not matches:
            return board
        for index in matches:
            board.cells[index] = Occupied(factory.create(rng))
    raise RuntimeError(f"Unable to fill a {size}x{size} board without matches after {MAX_REROLL_PASSES} passes")


def build_solvable_layout(factory: TokenFactory, rng: random.Random, size: int = GRID_SIZE) -> Board:
    """Build a match-free board with one engineered move.

    Cells (0,0), (0,1) and (1,2) share a color while (0,2) differs, so swapping
    (0,2) with (1,2) completes the top row. Remaining cells are chosen greedily,
    excluding any color that would close a run with already placed neighbours.
    """
    colors = list(factory.colors)
    key, other = rng.sample(colors, 2)
    layout: List[Optional[str]] = [None] * (size * size)
    layout[0] = key
    layout[1] = key
    layout[2] = other
    layout[size + 2] = key
    for index in range(size * size):
        if layout[index] is not None:
            continue
        available = [color for color in colors if not _completes_run(layout, size, index, color)]
        layout[index] = rng.choice(available or colors)
    board = Board(size=size, cells=[Occupied(factory.create(rng, color)) for color in layout])
    if check_for_matches(board) or find_potential_match(board) is None:
        raise RuntimeError(f"Unable to build a solvable {size}x{size} layout")
    return board


def _completes_run(layout: List[Optional[str]], size: int, index: int, color: str) -> bool:
    row, col = divmod(index, size)
    for dr, dc in ((0, 1), (1, 0)):
        for start in range(1 - MIN_MATCH, 1):
            window = [(row + dr * step, col + dc * step) for step in range(start, start + MIN_MATCH)]
            if any(not (0 <= r < size and 0 <= c < size) for r, c in window):
                continue
            if all(r * size + c == index or layout[r * size + c] == color for r, c in window):
                return True
    return False


def shuffle_board(
    board: Board,
    factory: TokenFactory,
    rng: random.Random,
    *,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> Board:
    """Randomly permute the tokens on the board until at least one move exists.

    Every attempt reshuffles the previous result. When max_attempts pass without a
    solvable arrangement, the tokens are laid out around an engineered move instead.
    """
    current = board
    for _ in range(max_attempts):
        current = _shuffle_once(current, factory, rng)
        if find_potential_match(current) is not None:
            return current
    logger.warning("No solvable arrangement after %d shuffles; arranging one", max_attempts)
    return _arrange_solvable(current, factory, rng)


def _shuffle_once(board: Board, factory: TokenFactory, rng: random.Random) -> Board:
    tokens = board.tokens()
    # Fisher-Yates
    for k in range(len(tokens) - 1, 0, -1):
        j = rng.randrange(k + 1)
        tokens[k], tokens[j] = tokens[j], tokens[k]
    shortfall = len(board) - len(tokens)
    if shortfall:
        tokens.extend(factory.create_many(rng, shortfall))
    return Board(size=board.size, cells=[Occupied(token) for token in tokens])


def _arrange_solvable(board: Board, factory: TokenFactory, rng: random.Random) -> Board:
    size = board.size
    tokens = board.tokens()
    by_color: Dict[str, List[Token]] = {}
    for token in tokens:
        by_color.setdefault(token.color, []).append(token)
    candidates = sorted(color for color, group in by_color.items() if len(group) >= MIN_MATCH)
    if candidates:
        key = rng.choice(candidates)
        pattern_tokens = by_color[key][:MIN_MATCH]
    else:
        key = rng.choice(factory.colors)
        pattern_tokens = [factory.create(rng, key) for _ in range(MIN_MATCH)]
    # Swapping cell 2 with cell size + 2 completes the top row.
    pattern = [0, 1, size + 2]
    used = {id(token) for token in pattern_tokens}
    remaining = iter([token for token in tokens if id(token) not in used])
    cells: List[Cell] = [EMPTY] * len(board)
    for index, token in zip(pattern, pattern_tokens):
        cells[index] = Occupied(token)
    for index in range(len(cells)):
        if index in pattern:
            continue
        token = next(remaining, None)
        cells[index] = Occupied(token if token is not None else factory.create(rng))
    return Board(size=size, cells=cells)


def resolve_step(board: Board, factory: TokenFactory, rng: random.Random) -> StepResult:
    """Advance the board by one resolution step.

    Matches are cleared first; otherwise holes are filled by gravity and refill;
    otherwise a stalemate board is shuffled. A board with none of these is stable.
    """
    matches = check_for_matches(board)
    if matches:
        cleared_board, cleared = clear_matches(board, matches)
        return StepResult(StepKind.CLEAR, cleared_board, cleared=cleared)
    if board.has_empty():
        refilled, spawned = _gravity_and_refill(board, factory, rng)
        return StepResult(StepKind.REFILL, refilled, spawned=spawned)
    if find_potential_match(board) is None:
        return StepResult(StepKind.SHUFFLE, shuffle_board(board, factory, rng))
    return StepResult(StepKind.STABLE, board)
