from __future__ import annotations

import random

from esper import World

from crush.components.board import Board, BoardHolder
from crush.components.hint_settings import HintSettings
from crush.components.palette import ColorPalette, PaletteRegistry
from crush.components.resolution_state import ResolutionState
from crush.components.token import TokenFactory, random_token_id


def get_palette(world: World) -> ColorPalette:
    for entity, _ in world.get_component(PaletteRegistry):
        return world.component_for_entity(entity, ColorPalette)
    raise RuntimeError("ColorPalette definitions not found")


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def token_factory(world: World) -> TokenFactory:
    """Build a TokenFactory over the palette's current spawnable colors."""
    palette = get_palette(world)
    return TokenFactory(
        colors=palette.spawnable_colors(),
        id_factory=getattr(world, "id_factory", random_token_id),
    )


def get_board_holder(world: World) -> BoardHolder:
    for _, holder in world.get_component(BoardHolder):
        return holder
    raise RuntimeError("Board has not been created")


def get_board(world: World) -> Board:
    return get_board_holder(world).board


def set_board(world: World, board: Board) -> None:
    get_board_holder(world).board = board


def get_or_create_resolution_state(world: World) -> ResolutionState:
    """Return the shared ResolutionState component, creating it if absent."""
    existing = list(world.get_component(ResolutionState))
    if existing:
        return existing[0][1]
    state = ResolutionState()
    world.create_entity(state)
    return state


def get_or_create_hint_settings(world: World) -> HintSettings:
    existing = list(world.get_component(HintSettings))
    if existing:
        return existing[0][1]
    settings = HintSettings()
    world.create_entity(settings)
    return settings
