"""Centralized constants for the studytrack scheduler.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- FSRS weights ----------
FSRS5_DEFAULT_WEIGHTS: tuple[float, ...] = (
    0.40255, 1.18385, 3.173, 15.69105,
    7.1949, 0.5345,
    1.4604, 0.0046, 1.54575, 0.1192,
    1.01925, 1.9395, 0.11, 0.29605,
    2.2698, 0.2315, 2.9898,
    0.51655, 0.6621,
)  # fmt: skip

FSRS6_DEFAULT_WEIGHTS: tuple[float, ...] = (
    0.212, 1.2931, 2.3065, 8.2956,
    6.4133, 0.8334,
    3.0194, 0.001, 1.8722, 0.1666,
    0.796, 1.4835, 0.0614, 0.2629,
    1.6483, 0.6014, 1.8729,
    0.5425, 0.0912, 0.0658,
    0.1542,
)  # fmt: skip

# ---------- Forgetting curve ----------
FSRS5_DECAY = -0.5
FSRS5_FACTOR = 19 / 81
CURVE_ANCHOR_RETENTION = 0.9  # R(S) == 0.9 by definition of stability

# ---------- Retention ----------
DEFAULT_REQUESTED_RETENTION = 0.90
MIN_REQUESTED_RETENTION = 0.01
MAX_REQUESTED_RETENTION = 0.999

# ---------- Memory state bounds ----------
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
MIN_STABILITY = 0.1
MAX_STABILITY = 36500.0  # ceiling for a repeat review's stability (100 years)
STATE_DECIMALS = 2

# ---------- Intervals (days) ----------
MIN_INTERVAL_DAYS = 1
DEFAULT_AGAIN_MIN_INTERVAL_DAYS = 1
DEFAULT_MAX_INTERVAL_DAYS = 36500

# ---------- Fuzzing ----------
# (start, end, factor): the fuzz delta grows by `factor` per day of interval
# that falls inside [start, end).
DEFAULT_FUZZ_RANGES: tuple[tuple[float, float, float], ...] = (
    (2.5, 7.0, 0.15),
    (7.0, 20.0, 0.1),
    (20.0, float("inf"), 0.05),
)
MIN_FUZZ_INTERVAL = 2.5

# ---------- Status thresholds (days until review) ----------
STATUS_SOON_DAYS = 3
STATUS_NEAR_DAYS = 7

# ---------- Difficulty label thresholds ----------
DIFFICULTY_VERY_EASY_MAX = 2.0
DIFFICULTY_EASY_MAX = 4.0
DIFFICULTY_MEDIUM_MAX = 6.0
DIFFICULTY_HARD_MAX = 8.0

# ---------- Performance-based rating suggestion ----------
SUGGEST_EASY_ACCURACY = 0.9
SUGGEST_GOOD_ACCURACY = 0.7
SUGGEST_HARD_ACCURACY = 0.5
