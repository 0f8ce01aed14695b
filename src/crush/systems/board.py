from esper import World
from crush.events.bus import (EventBus, EVENT_TILE_SWAP_DO, EVENT_TILE_SWAP_FINALIZE, EVENT_BOARD_CREATED,
                              EVENT_BOARD_CHANGED, EVENT_BLAST_REQUEST, EVENT_BLAST_CLEARED,
                              EVENT_COLOR_CLEAR_REQUEST, EVENT_COLOR_CLEARED)
from crush.components.board import Board, BoardHolder
from crush.constants import GRID_SIZE
from crush.systems.board_ops import blast_area, clear_color, count_by_color, create_board, is_adjacent, swap_cells
from crush.utils.board_state import get_or_create_resolution_state, get_rng, token_factory

class BoardSystem:
    """Owns the single Board entity and applies committed changes to it."""
    def __init__(self, world: World, event_bus: EventBus, size: int = GRID_SIZE):
        self.world = world
        self.event_bus = event_bus
        self.size = size
        self.board_entity = self.world.create_entity()
        self.event_bus.subscribe(EVENT_TILE_SWAP_DO, self.on_swap_do)
        self.event_bus.subscribe(EVENT_BLAST_REQUEST, self.on_blast_request)
        self.event_bus.subscribe(EVENT_COLOR_CLEAR_REQUEST, self.on_color_clear_request)
        self.new_board()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, BoardHolder).board

    @board.setter
    def board(self, value: Board) -> None:
        if value.size != self.size:
            raise ValueError(f"Board size {value.size} does not match system size {self.size}")
        self.world.component_for_entity(self.board_entity, BoardHolder).board = value

    def new_board(self) -> Board:
        board = create_board(token_factory(self.world), get_rng(self.world), self.size)
        if self.world.has_component(self.board_entity, BoardHolder):
            self.board = board
        else:
            self.world.add_component(self.board_entity, BoardHolder(board=board))
        self.event_bus.emit(EVENT_BOARD_CREATED, size=self.size)
        return board

    def is_adjacent(self, a: int, b: int) -> bool:
        return is_adjacent(self.board, a, b)

    def on_swap_do(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if src is None or dst is None:
            return
        self.board = swap_cells(self.board, src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst)

    def on_blast_request(self, sender, **kwargs):
        index = kwargs.get('index')
        if index is None:
            return
        # Boosters wait until the board has settled.
        if get_or_create_resolution_state(self.world).processing:
            return
        radius = kwargs.get('radius', 1)
        self.board, cleared = blast_area(self.board, index, radius)
        if not cleared:
            return
        self.event_bus.emit(
            EVENT_BLAST_CLEARED,
            positions=[idx for idx, _ in cleared],
            colors=cleared,
            counts=count_by_color(cleared),
        )
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason='blast')

    def on_color_clear_request(self, sender, **kwargs):
        color = kwargs.get('color')
        if color is None:
            return
        if get_or_create_resolution_state(self.world).processing:
            return
        self.board, cleared = clear_color(self.board, color)
        if not cleared:
            return
        self.event_bus.emit(
            EVENT_COLOR_CLEARED,
            color=color,
            positions=[idx for idx, _ in cleared],
            colors=cleared,
            counts=count_by_color(cleared),
        )
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason='color_clear')
