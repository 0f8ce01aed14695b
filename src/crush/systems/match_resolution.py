import logging

from esper import World
from crush.events.bus import (EventBus, EVENT_TICK, EVENT_TILE_SWAP_FINALIZE, EVENT_BOARD_CHANGED,
                              EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED, EVENT_REFILL_COMPLETED,
                              EVENT_BOARD_SHUFFLED, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE)
from crush.constants import STEP_DELAY
from crush.systems.board_ops import StepKind, StepResult, count_by_color, resolve_step
from crush.utils.board_state import (get_board, get_or_create_resolution_state, get_rng, set_board,
                                     token_factory)

logger = logging.getLogger(__name__)

# Resolution steps allowed in one run_until_stable call before giving up.
MAX_RESOLUTION_STEPS = 1000

class MatchResolutionSystem:
    """Drives the board from a committed change back to a stable state.

    Flow:
      - A finalized swap or a board change marks resolution as in progress.
      - Every ``step_delay`` seconds of ticks one resolve_step runs:
        clear matches, else fall/refill, else shuffle a stalemate.
      - When a step reports the board stable, EVENT_CASCADE_COMPLETE fires and
        processing ends.
    Callers read cleared positions and colors from EVENT_MATCH_CLEARED.
    """
    def __init__(self, world: World, event_bus: EventBus, step_delay: float = STEP_DELAY):
        self.world = world
        self.event_bus = event_bus
        self.step_delay = step_delay
        self.event_bus.subscribe(EVENT_TILE_SWAP_FINALIZE, self.on_swap_finalize)
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_swap_finalize(self, sender, **kwargs):
        self.start(reason='swap')

    def on_board_changed(self, sender, **kwargs):
        state = get_or_create_resolution_state(self.world)
        # Already resolving; the running loop will pick the change up.
        if state.processing:
            return
        self.start(reason=kwargs.get('reason', 'board_changed'))

    def start(self, reason: str) -> None:
        state = get_or_create_resolution_state(self.world)
        state.processing = True
        state.cascade_depth = 0
        state.elapsed = 0.0
        state.reason = reason

    def on_tick(self, sender, **kwargs):
        state = get_or_create_resolution_state(self.world)
        if not state.processing:
            return
        state.elapsed += kwargs.get('dt', 0.0)
        while state.processing and state.elapsed >= self.step_delay:
            state.elapsed -= self.step_delay
            self.step()

    def run_until_stable(self, reason: str = 'manual') -> int:
        """Resolve without waiting for ticks; returns the number of match clears."""
        state = get_or_create_resolution_state(self.world)
        if not state.processing:
            self.start(reason)
        for _ in range(MAX_RESOLUTION_STEPS):
            self.step()
            if not state.processing:
                return state.cascade_depth
        raise RuntimeError(f"Board did not stabilise within {MAX_RESOLUTION_STEPS} steps")

    def step(self) -> StepResult:
        state = get_or_create_resolution_state(self.world)
        result = resolve_step(get_board(self.world), token_factory(self.world), get_rng(self.world))
        set_board(self.world, result.board)
        if result.kind is StepKind.CLEAR:
            state.cascade_depth += 1
            positions = [idx for idx, _ in result.cleared]
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, positions=positions)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), reason=state.reason)
            self.event_bus.emit(
                EVENT_MATCH_CLEARED,
                positions=positions,
                colors=result.cleared,
                counts=count_by_color(result.cleared),
            )
        elif result.kind is StepKind.REFILL:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=result.spawned)
        elif result.kind is StepKind.SHUFFLE:
            logger.info("No moves left; board shuffled")
            self.event_bus.emit(EVENT_BOARD_SHUFFLED, reason='stalemate')
        else:
            state.processing = False
            state.elapsed = 0.0
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.cascade_depth)
        return result
