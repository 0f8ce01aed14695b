GRID_SIZE = 8
MIN_MATCH = 3

# Upper bound on full reshuffles before the constructive fallback layout is used.
MAX_SHUFFLE_ATTEMPTS = 50
# Upper bound on re-roll passes while removing matches from a freshly filled board.
MAX_REROLL_PASSES = 500

# Seconds between resolution steps (clear -> fall/refill -> re-check) driven by ticks.
STEP_DELAY = 0.25
# Seconds of idle time before a hint is offered.
HINT_DELAY = 5.0

# Default six-color palette (name -> RGB).
DEFAULT_COLORS = {
    'red':    (180, 60, 60),
    'orange': (200, 130, 60),
    'yellow': (200, 190, 80),
    'green':  (80, 170, 80),
    'blue':   (70, 90, 180),
    'purple': (170, 80, 160),
}
