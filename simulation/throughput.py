"""simulation/throughput.py — Lane capacity, output and global rates.

Everything here is a pure read of the state plus the injected
catalog and tuning.  Upgrade effects and perk effects of the same
kind are summed separately and compound multiplicatively, e.g.::

    raw input = base * lanes * (1 + upgrades) * (1 + perks)
"""

from __future__ import annotations
import math
from dataclasses import dataclass

from components import Lane, SimulationState, unlocked
from core.data import Catalog
from core.tuning import EngineTuning


@dataclass(frozen=True)
class LaneThroughput:
    capacity: float            # raw input processed per second
    output_multiplier: float   # payload per processed unit
    active_modules: int        # enabled AND unlocked, feeds latency


# ── Effect totals ───────────────────────────────────────────────────

def upgrade_effect(state: SimulationState, catalog: Catalog, kind: str) -> float:
    """Sum of ``level * value`` for every purchased upgrade with *kind*."""
    total = 0.0
    for uid, defn in catalog.upgrades.items():
        level = state.upgrade_level(uid)
        if level:
            total += level * defn.effects.get(kind, 0.0)
    return total


def perk_effect(state: SimulationState, catalog: Catalog, kind: str) -> float:
    """Sum of ``level * value`` for every owned perk with *kind*."""
    total = 0.0
    for pid, defn in catalog.perks.items():
        level = state.meta.perk_level(pid)
        if level:
            total += level * defn.effects.get(kind, 0.0)
    return total


# ── Per-lane ────────────────────────────────────────────────────────

def lane_throughput(lane: Lane, state: SimulationState, catalog: Catalog,
                    tuning: EngineTuning) -> LaneThroughput:
    """Processing capacity and output multiplier for one lane."""
    capacity = tuning.base_lane_capacity
    output = 1.0
    active = 0

    for module_id in lane.enabled_modules:
        defn = catalog.modules.get(module_id)
        level = state.module_level(module_id)
        if defn is None or level <= 0:
            continue
        capacity += defn.capacity_bonus + defn.capacity_per_level * (level - 1)
        output *= defn.output_multiplier + defn.output_per_level * (level - 1)
        active += 1

    capacity += upgrade_effect(state, catalog, "capacity_flat")

    proto = catalog.protocols[state.active_protocol]
    capacity *= proto.throughput_multiplier

    # Protocol compliance
    compliant = all(lane.has_module(m) and unlocked(state.modules, m)
                    for m in proto.required_modules)
    if not compliant:
        output *= tuning.noncompliance_output

    capacity *= 1.0 + perk_effect(state, catalog, "capacity_mult")
    output *= 1.0 + perk_effect(state, catalog, "output_mult")

    return LaneThroughput(capacity=capacity, output_multiplier=output,
                          active_modules=active)


# ── Global rates ────────────────────────────────────────────────────

def raw_input_rate(state: SimulationState, catalog: Catalog,
                   tuning: EngineTuning) -> float:
    """Total raw input generated per second across all lanes."""
    rate = tuning.scrap_per_lane * len(state.lanes)
    rate *= 1.0 + upgrade_effect(state, catalog, "scrap_rate_mult")
    rate *= 1.0 + perk_effect(state, catalog, "scrap_rate_mult")
    return rate


def credit_rate(state: SimulationState, catalog: Catalog) -> float:
    """Credits earned per payload unit."""
    rate = catalog.protocols[state.active_protocol].credit_multiplier
    rate *= 1.0 + upgrade_effect(state, catalog, "credit_rate_mult")
    rate *= 1.0 + perk_effect(state, catalog, "credit_rate_mult")
    return rate


def drop_interval(state: SimulationState, catalog: Catalog,
                  tuning: EngineTuning) -> int:
    """Steps between automatic fragment drops."""
    proto = catalog.protocols[state.active_protocol]
    # round half up
    interval = math.floor(100.0 / proto.fragments_per_hundred + 0.5)
    interval -= upgrade_effect(state, catalog, "fragment_interval_reduction")
    interval -= perk_effect(state, catalog, "fragment_interval_reduction")
    return max(tuning.min_drop_interval, int(interval))


def queue_tolerance(state: SimulationState, catalog: Catalog) -> float:
    return upgrade_effect(state, catalog, "queue_tolerance")


def latency_reduction(state: SimulationState, catalog: Catalog,
                      tuning: EngineTuning) -> float:
    """Combined upgrade + perk penalty recovery, capped by tuning."""
    total = (upgrade_effect(state, catalog, "latency_reduction")
             + perk_effect(state, catalog, "latency_reduction"))
    return min(tuning.max_latency_reduction, total)
