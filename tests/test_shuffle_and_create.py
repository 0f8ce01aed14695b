import random
from collections import Counter

import pytest

from crush.components.token import TokenFactory
from crush.systems.board_ops import (build_solvable_layout, check_for_matches, create_board,
                                     find_potential_match, shuffle_board)
from tests.helpers import board_from_colors, board_from_rows, counter_ids, striped_colors

SIX_COLORS = ['red', 'orange', 'yellow', 'green', 'blue', 'purple']


def make_factory():
    return TokenFactory(colors=SIX_COLORS, id_factory=counter_ids("new"))


def color_counts(board):
    return Counter(token.color for token in board.tokens())


def test_shuffle_preserves_tokens_and_breaks_stalemate():
    board = board_from_colors(striped_colors(8), 8)
    shuffled = shuffle_board(board, make_factory(), random.Random(11))
    assert color_counts(shuffled) == color_counts(board)
    assert {t.id for t in shuffled.tokens()} == {t.id for t in board.tokens()}
    assert find_potential_match(shuffled) is not None


@pytest.mark.parametrize("seed", range(10))
def test_shuffle_always_returns_solvable_board(seed):
    rng = random.Random(seed)
    board = board_from_colors([rng.choice(SIX_COLORS) for _ in range(36)], 6)
    shuffled = shuffle_board(board, make_factory(), rng)
    assert len(shuffled) == 36
    assert not shuffled.has_empty()
    assert color_counts(shuffled) == color_counts(board)
    assert find_potential_match(shuffled) is not None


def test_shuffle_is_reproducible_for_a_seed():
    board = board_from_colors(striped_colors(8), 8)
    first = shuffle_board(board, make_factory(), random.Random(5))
    second = shuffle_board(board, make_factory(), random.Random(5))
    assert first.cells == second.cells


def test_shuffle_fallback_arranges_existing_tokens():
    board = board_from_colors(striped_colors(8), 8)
    arranged = shuffle_board(board, make_factory(), random.Random(2), max_attempts=0)
    assert color_counts(arranged) == color_counts(board)
    assert arranged.color_at(0) == arranged.color_at(1) == arranged.color_at(10)
    assert find_potential_match(arranged) is not None


def test_shuffle_fallback_spawns_pattern_when_no_color_repeats_enough():
    board = board_from_rows(["ROY", "GBP", "ROY"])
    arranged = shuffle_board(board, make_factory(), random.Random(4), max_attempts=0)
    assert not arranged.has_empty()
    assert arranged.color_at(0) == arranged.color_at(1) == arranged.color_at(5)
    assert find_potential_match(arranged) is not None


def test_shuffle_fills_missing_cells_with_fresh_tokens():
    colors = striped_colors(5)
    colors[3] = None
    colors[17] = None
    board = board_from_colors(colors, 5)
    shuffled = shuffle_board(board, make_factory(), random.Random(8))
    assert not shuffled.has_empty()
    assert sum(1 for t in shuffled.tokens() if t.id.startswith('new')) >= 2


@pytest.mark.parametrize("seed", range(20))
def test_created_board_has_no_matches_and_a_move(seed):
    factory = make_factory()
    board = create_board(factory, random.Random(seed))
    assert len(board) == 64
    assert not board.has_empty()
    assert check_for_matches(board) == []
    assert find_potential_match(board) is not None
    assert set(color_counts(board)) <= set(SIX_COLORS)


@pytest.mark.parametrize("size", [3, 4, 5])
def test_small_boards_are_still_solvable(size):
    board = create_board(make_factory(), random.Random(size), size)
    assert check_for_matches(board) == []
    assert find_potential_match(board) is not None


def test_unsolvable_creation_allowed_when_requested():
    board = create_board(make_factory(), random.Random(1), 6, ensure_solvable=False)
    assert check_for_matches(board) == []


def test_creation_is_reproducible_for_a_seed():
    first = create_board(TokenFactory(SIX_COLORS, counter_ids()), random.Random(42))
    second = create_board(TokenFactory(SIX_COLORS, counter_ids()), random.Random(42))
    assert first.cells == second.cells


@pytest.mark.parametrize("size,seed", [(3, 0), (4, 1), (6, 2), (8, 3), (8, 4)])
def test_constructive_layout_is_match_free_and_solvable(size, seed):
    board = build_solvable_layout(make_factory(), random.Random(seed), size)
    assert check_for_matches(board) == []
    assert find_potential_match(board) is not None
    assert board.color_at(0) == board.color_at(1) == board.color_at(size + 2)


def test_constructive_layout_with_three_colors():
    factory = TokenFactory(colors=['red', 'green', 'blue'], id_factory=counter_ids())
    board = build_solvable_layout(factory, random.Random(0), 8)
    assert check_for_matches(board) == []
    assert find_potential_match(board) is not None
