import math
import time


# Current wall-clock time in whole epoch milliseconds. Wall clock rather than monotonic, since the start time
# gets persisted and has to survive a restart.
def now_ms():
    return int(time.time() * 1000)


# Rounds halves up (towards +inf) instead of Python's round-half-to-even.
def round_half_up(value):
    return math.floor(value + 0.5)
