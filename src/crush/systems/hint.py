from esper import World
from crush.events.bus import (EventBus, EVENT_TICK, EVENT_TILE_SWAP_REQUEST, EVENT_HINT_REQUEST,
                              EVENT_HINT_AVAILABLE, EVENT_HINT_UNAVAILABLE, EVENT_HINT_CLEARED,
                              EVENT_CASCADE_COMPLETE, EVENT_BOARD_CREATED)
from crush.systems.board_ops import PotentialMatch, find_potential_match
from crush.utils.board_state import get_board, get_or_create_hint_settings, get_or_create_resolution_state

class HintSystem:
    """Surfaces the first match-making swap after the player has been idle for a while.

    The idle timer restarts on every swap request and after every resolution; it does
    not run while the board is resolving or when hints are disabled. An explicit
    EVENT_HINT_REQUEST shows the hint immediately.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.idle = 0.0
        self.current: PotentialMatch | None = None
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_activity)
        event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_activity)
        event_bus.subscribe(EVENT_BOARD_CREATED, self.on_activity)
        event_bus.subscribe(EVENT_HINT_REQUEST, self.on_hint_request)

    def _blocked_reason(self) -> str | None:
        if not get_or_create_hint_settings(self.world).enabled:
            return 'disabled'
        if get_or_create_resolution_state(self.world).processing:
            return 'busy'
        return None

    def on_tick(self, sender, **kwargs):
        reason = self._blocked_reason()
        if reason == 'disabled':
            self.on_activity(sender)
            return
        if self.current is not None:
            return
        if reason is not None:
            self.idle = 0.0
            return
        self.idle += kwargs.get('dt', 0.0)
        if self.idle >= get_or_create_hint_settings(self.world).delay:
            self.idle = 0.0
            self.show_hint()

    def on_activity(self, sender, **kwargs):
        self.idle = 0.0
        if self.current is not None:
            self.current = None
            self.event_bus.emit(EVENT_HINT_CLEARED)

    def on_hint_request(self, sender, **kwargs):
        reason = self._blocked_reason()
        if reason is not None:
            self.event_bus.emit(EVENT_HINT_UNAVAILABLE, reason=reason)
            return
        self.show_hint()

    def show_hint(self) -> PotentialMatch | None:
        potential = find_potential_match(get_board(self.world))
        if potential is None:
            self.event_bus.emit(EVENT_HINT_UNAVAILABLE, reason='stalemate')
            return None
        self.current = potential
        self.event_bus.emit(EVENT_HINT_AVAILABLE, swap=potential.swap, match=potential.match)
        return potential
