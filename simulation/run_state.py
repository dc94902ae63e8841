"""simulation/run_state.py — Run-start defaults.

A fresh run (first launch or right after a prestige reset) starts
with empty pools, ``start_lanes`` lanes, the free modules unlocked at
level 1, the start protocol, and an empty contract board.
"""

from __future__ import annotations

from components import Lane, MetaProgress, ProtocolSet, SimulationState
from core.data import Catalog, CatalogError
from core.tuning import EngineTuning


def make_lane(lane_id: int, enabled: list[str]) -> Lane:
    return Lane(id=lane_id, enabled_modules=list(enabled))


def new_run(catalog: Catalog, tuning: EngineTuning, *,
            meta: MetaProgress | None = None, lanes: int | None = None,
            now: float = 0.0) -> SimulationState:
    """Build the run-start state.

    *meta* carries over from a previous run (copied, never aliased).
    *lanes* overrides ``tuning.start_lanes``.
    """
    if tuning.start_protocol not in catalog.protocols:
        raise CatalogError(f"start protocol '{tuning.start_protocol}' "
                           f"is not in the catalog")

    starting = catalog.starting_modules()
    lane_count = tuning.start_lanes if lanes is None else lanes
    lane_count = max(1, min(lane_count, tuning.max_lanes))

    return SimulationState(
        lanes=[make_lane(i, starting) for i in range(lane_count)],
        modules={mid: (1 if mid in starting else 0) for mid in catalog.modules},
        active_protocol=tuning.start_protocol,
        protocols_used=ProtocolSet([tuning.start_protocol]),
        meta=meta.copy() if meta is not None else MetaProgress(),
        last_tick=now,
    )
