"""core/tuning.py — Data-driven tuning constants.

All engine numbers live in ``data/tuning.toml`` and are loaded once
at startup.  Any caller can read a raw value with::

    from core.tuning import get
    chunk = get("replay", "chunk_seconds", 60.0)

The engine itself never reads this module's globals.  Build a frozen
``EngineTuning`` from the loaded file and hand it to the engine::

    from core import tuning
    tuning.load()
    engine = Engine(catalog, tuning.engine_tuning())

Hot-reload: call ``reload()`` to re-read the file, then build a fresh
``EngineTuning``.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib                # pip install tomli

from core import constants as C


_data: dict = {}
_path: Path | None = None


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning constants from *path*.

    If *path* is ``None``, default to ``data/tuning.toml`` relative to
    the project root (one level above ``core/``).
    """
    global _data, _path

    if path is None:
        root = Path(__file__).resolve().parent.parent
        path = root / "data" / "tuning.toml"
    else:
        path = Path(path)

    _path = path

    if not path.exists():
        print(f"[TUNING] {path} not found — using defaults")
        _data = {}
        return

    with open(path, "rb") as f:
        _data = tomllib.load(f)

    count = _count_leaves(_data)
    print(f"[TUNING] Loaded {count} values from {path}")


def reload() -> None:
    """Re-read the tuning file from disk (hot-reload)."""
    load(_path)


def _table(section_path: str) -> dict | None:
    """Walk dotted *section_path* into the loaded file; None if absent."""
    node = _data
    for part in section_path.split("."):
        node = node.get(part) if isinstance(node, dict) else None
        if node is None:
            return None
    return node if isinstance(node, dict) else None


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation to traverse nested tables, e.g.
    ``"latency"`` looks up ``[latency]``.

    >>> get("latency", "penalty_floor", 0.1)
    0.1
    """
    table = _table(section)
    return default if table is None else table.get(key, default)


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict."""
    table = _table(section_path)
    return dict(table) if table is not None else {}


def _count_leaves(d: dict) -> int:
    return sum(_count_leaves(v) if isinstance(v, dict) else 1
               for v in d.values())


# ═══════════════════════════════════════════════════════════════════
#  Engine tuning snapshot
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EngineTuning:
    """Immutable bundle of every engine constant.

    Defaults are the reference tuning from ``core.constants``.
    """
    # latency
    latency_base_ms: float = C.LATENCY_BASE_MS
    latency_ms_per_module: float = C.LATENCY_MS_PER_MODULE
    latency_ms_per_queue_unit: float = C.LATENCY_MS_PER_QUEUE_UNIT
    free_depth: int = C.FREE_DEPTH
    depth_penalty: float = C.DEPTH_PENALTY
    congestion_penalty: float = C.CONGESTION_PENALTY
    penalty_floor: float = C.PENALTY_FLOOR
    max_latency_reduction: float = C.MAX_LATENCY_REDUCTION
    # throughput
    base_lane_capacity: float = C.BASE_LANE_CAPACITY
    scrap_per_lane: float = C.SCRAP_PER_LANE
    noncompliance_output: float = C.NONCOMPLIANCE_OUTPUT
    min_drop_interval: int = C.MIN_DROP_INTERVAL
    # prestige
    prestige_threshold: float = C.PRESTIGE_THRESHOLD
    reward_exponent: float = C.REWARD_EXPONENT
    high_tier_weight: float = C.HIGH_TIER_WEIGHT
    completion_weight: float = C.COMPLETION_WEIGHT
    board_seed_stride: int = C.BOARD_SEED_STRIDE
    # run layout
    start_protocol: str = C.START_PROTOCOL
    start_lanes: int = C.START_LANES
    max_lanes: int = C.MAX_LANES
    lane_costs: tuple[float, ...] = C.LANE_COSTS
    board_size: int = C.BOARD_SIZE
    high_tier: str = C.HIGH_TIER
    # replay
    replay_chunk_seconds: float = C.REPLAY_CHUNK_SECONDS
    offline_cap_hours: float = C.OFFLINE_CAP_HOURS
    # persistence
    save_version: int = C.SAVE_VERSION
    autosave_interval: int = C.AUTOSAVE_INTERVAL

    def lane_cost(self, current_lanes: int) -> float:
        """Credits needed to build lane number ``current_lanes + 1``."""
        idx = min(max(0, current_lanes - 1), len(self.lane_costs) - 1)
        return self.lane_costs[idx]


# TOML section → EngineTuning fields it may set
_SECTIONS: dict[str, tuple[str, ...]] = {
    "latency": (
        "latency_base_ms", "latency_ms_per_module",
        "latency_ms_per_queue_unit", "free_depth", "depth_penalty",
        "congestion_penalty", "penalty_floor", "max_latency_reduction",
    ),
    "throughput": (
        "base_lane_capacity", "scrap_per_lane", "noncompliance_output",
        "min_drop_interval",
    ),
    "prestige": (
        "prestige_threshold", "reward_exponent", "high_tier_weight",
        "completion_weight", "board_seed_stride",
    ),
    "run": (
        "start_protocol", "start_lanes", "max_lanes", "lane_costs",
        "board_size", "high_tier",
    ),
    "replay": ("replay_chunk_seconds", "offline_cap_hours"),
    "save": ("save_version", "autosave_interval"),
}


def engine_tuning() -> EngineTuning:
    """Build an ``EngineTuning`` from the currently loaded file.

    Keys missing from the file keep their reference default.
    """
    kwargs: dict = {}
    valid = {f.name for f in fields(EngineTuning)}
    for sect, keys in _SECTIONS.items():
        values = section(sect)
        for key in keys:
            if key in values and key in valid:
                kwargs[key] = values[key]
    if "lane_costs" in kwargs:
        kwargs["lane_costs"] = tuple(float(c) for c in kwargs["lane_costs"])
    return EngineTuning(**kwargs)
