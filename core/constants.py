"""core/constants.py — Reference tuning shared across the engine.

Centralises magic numbers so there's exactly one place to change them.
``data/tuning.toml`` can override every value here; these are the
fallbacks used when a key is missing (and by tests that build an
``EngineTuning`` directly).

Unit System
-----------
    Raw input / payload     u       (unitless packet units)
    Rates                   u/s     (units per simulated second)
    Time (simulated)        s       (one step is normally 1 s)
    Time (wall clock)       s       (epoch seconds, only for replay)
    Latency                 ms      (display only, gates nothing)
    Penalty                 —       (0.1–1.0 output multiplier)
    Credits / fragments     —       (counts)
    Reputation              —       (persistent prestige currency)

Latency Penalty
~~~~~~~~~~~~~~~
    raw     = max(FLOOR, 1 - DEPTH*(modules - FREE_DEPTH) - CONGESTION*queue)
    penalty = min(1, raw + reduction * (1 - raw))

Chains of up to ``FREE_DEPTH`` modules cost nothing; every queued
unit above the buffer tolerance shaves a little off.
"""

# ── Latency model ───────────────────────────────────────────────────
LATENCY_BASE_MS: float = 10.0
LATENCY_MS_PER_MODULE: float = 5.0
LATENCY_MS_PER_QUEUE_UNIT: float = 0.5

FREE_DEPTH: int = 3                   # modules before depth penalty starts
DEPTH_PENALTY: float = 0.06           # per module beyond FREE_DEPTH
CONGESTION_PENALTY: float = 0.0008    # per effective queued unit
PENALTY_FLOOR: float = 0.1
MAX_LATENCY_REDUCTION: float = 0.9    # cap on upgrades + perks combined

# ── Throughput model ────────────────────────────────────────────────
BASE_LANE_CAPACITY: float = 3.0       # u/s with no modules
SCRAP_PER_LANE: float = 5.0           # raw input u/s per lane
NONCOMPLIANCE_OUTPUT: float = 0.5     # output mult when protocol unmet
MIN_DROP_INTERVAL: int = 5            # steps between fragment drops

# ── Prestige ────────────────────────────────────────────────────────
PRESTIGE_THRESHOLD: float = 3000.0
REWARD_EXPONENT: float = 0.25
HIGH_TIER_WEIGHT: float = 0.5
COMPLETION_WEIGHT: float = 0.25
BOARD_SEED_STRIDE: int = 1000         # seed = steps ^ (resets * stride)

# ── Run layout ──────────────────────────────────────────────────────
START_PROTOCOL: str = "burst"
START_LANES: int = 1
MAX_LANES: int = 3
LANE_COSTS: tuple[float, ...] = (200.0, 500.0)   # cost of lane 2, lane 3
BOARD_SIZE: int = 3
HIGH_TIER: str = "high"

# ── Offline replay ──────────────────────────────────────────────────
REPLAY_CHUNK_SECONDS: float = 60.0
OFFLINE_CAP_HOURS: float = 8.0

# ── Persistence ─────────────────────────────────────────────────────
SAVE_VERSION: int = 1
AUTOSAVE_INTERVAL: int = 60           # steps
