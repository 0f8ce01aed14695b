import random

import pytest

from crush.components.token import Token, TokenFactory
from tests.helpers import counter_ids


def test_factory_uses_injected_ids_and_palette_colors():
    factory = TokenFactory(colors=['red', 'green', 'blue'], id_factory=counter_ids())
    rng = random.Random(3)
    tokens = factory.create_many(rng, 20)
    assert [token.id for token in tokens[:3]] == ['t0', 't1', 't2']
    assert {token.color for token in tokens} <= {'red', 'green', 'blue'}


def test_factory_is_reproducible_with_seeded_rng():
    first = TokenFactory(colors=['red', 'green', 'blue', 'yellow'], id_factory=counter_ids())
    second = TokenFactory(colors=['red', 'green', 'blue', 'yellow'], id_factory=counter_ids())
    assert first.create_many(random.Random(9), 10) == second.create_many(random.Random(9), 10)


def test_explicit_color_is_respected():
    factory = TokenFactory(colors=['red', 'green', 'blue'])
    token = factory.create(random.Random(), color='blue')
    assert token.color == 'blue'
    assert token.id


def test_factory_needs_three_colors():
    with pytest.raises(ValueError):
        TokenFactory(colors=['red', 'green'])


def test_tokens_are_immutable():
    token = Token(id='a', color='red')
    with pytest.raises(AttributeError):
        token.color = 'blue'
