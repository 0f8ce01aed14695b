import random
from typing import Callable, Dict, Iterable, Tuple

from esper import World
from crush.components.palette import ColorPalette, PaletteRegistry
from crush.components.token import random_token_id
from crush.constants import DEFAULT_COLORS


def create_world(
    *,
    rng: random.Random | None = None,
    palette: Dict[str, Tuple[int, int, int]] | None = None,
    spawnable: Iterable[str] | None = None,
    id_factory: Callable[[], str] | None = None,
) -> World:
    """Create the world resources shared by the board systems.

    The world carries a seedable ``random`` and the token ``id_factory`` as attributes,
    plus a single registry entity holding the ColorPalette.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "id_factory", id_factory or random_token_id)

    world.create_entity(
        PaletteRegistry(),
        ColorPalette(
            colors=dict(palette or DEFAULT_COLORS),
            spawnable=list(spawnable or []),
        ),
    )
    return world
