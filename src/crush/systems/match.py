import logging

from esper import World
from crush.events.bus import (EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_VALID,
                              EVENT_TILE_SWAP_INVALID, EVENT_TILE_SWAP_DO)
from crush.systems.board_ops import is_adjacent, validate_swap
from crush.utils.board_state import get_board, get_or_create_resolution_state

logger = logging.getLogger(__name__)

class MatchSystem:
    """Accepts a player swap only when it produces a match on the resulting board."""
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if src is None or dst is None:
            return
        reason = self.rejection_reason(src, dst)
        if reason is not None:
            logger.debug("Swap %s <-> %s rejected: %s", src, dst, reason)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
            return
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        self.event_bus.emit(EVENT_TILE_SWAP_DO, src=src, dst=dst)

    def rejection_reason(self, src: int, dst: int) -> str | None:
        if get_or_create_resolution_state(self.world).processing:
            return 'busy'
        board = get_board(self.world)
        if not (0 <= src < len(board) and 0 <= dst < len(board)):
            return 'out_of_bounds'
        if not is_adjacent(board, src, dst):
            return 'not_adjacent'
        if board.token_at(src) is None or board.token_at(dst) is None:
            return 'empty_cell'
        would_match, _ = validate_swap(board, src, dst)
        if not would_match:
            return 'no_match'
        return None
