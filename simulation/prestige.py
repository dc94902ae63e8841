"""simulation/prestige.py — Prestige readiness, reward, reset and perks.

A prestige reset trades the whole run for reputation.  Only
``MetaProgress`` survives; the Head Start perk adds starting lanes.

Reward::

    floor(payload ** 0.25)
      + high_tier_completed * 0.5
      + contracts_completed * 0.25
      + distinct protocols used this run

floored at 1, so every reset earns something.
"""

from __future__ import annotations
import math

from components import SimulationState
from core.data import Catalog
from core.tuning import EngineTuning
from simulation.result import ActionResult, NoopReason
from simulation.run_state import new_run
from simulation.throughput import perk_effect


def can_prestige(state: SimulationState, tuning: EngineTuning) -> bool:
    return state.stats.total_payload >= tuning.prestige_threshold


def reputation_gain(state: SimulationState, tuning: EngineTuning) -> float:
    """Reputation a reset would pay out right now."""
    payload_score = math.floor(
        max(0.0, state.stats.total_payload) ** tuning.reward_exponent)
    # Not floored: contract terms keep reputation fractional (e.g. 8.25).
    contract_score = (state.stats.high_tier_completed * tuning.high_tier_weight
                      + state.stats.contracts_completed * tuning.completion_weight)
    protocol_score = len(state.protocols_used)
    return max(1.0, payload_score + contract_score + protocol_score)


def available_reputation(state: SimulationState) -> float:
    return state.meta.available_reputation


def reset(state: SimulationState, catalog: Catalog, tuning: EngineTuning,
          now: float | None = None) -> SimulationState:
    """Start a new run, carrying meta progress forward.

    The caller decides when; readiness is not enforced here.  *now*
    stamps the new run's wall-clock marker (defaults to the old one).
    """
    gained = reputation_gain(state, tuning)

    meta = state.meta.copy()
    meta.reset_count += 1
    meta.total_reputation += gained

    extra = int(perk_effect(state, catalog, "extra_lanes"))
    fresh = new_run(catalog, tuning, meta=meta,
                    lanes=tuning.start_lanes + extra,
                    now=state.last_tick if now is None else now)

    print(f"[PRESTIGE] Reset #{meta.reset_count}: +{gained:g} reputation "
          f"(total {meta.total_reputation:g}), {len(fresh.lanes)} lane(s)")
    return fresh


def purchase_perk(state: SimulationState, catalog: Catalog,
                  perk_id: str) -> ActionResult:
    """Spend reputation on one level of *perk_id*."""
    defn = catalog.perks.get(perk_id)
    if defn is None:
        return ActionResult.noop(NoopReason.UNKNOWN_ID)

    level = state.meta.perk_level(perk_id)
    if level >= defn.max_level:
        return ActionResult.noop(NoopReason.MAX_LEVEL)
    if available_reputation(state) < defn.cost_per_level:
        return ActionResult.noop(NoopReason.INSUFFICIENT_FUNDS)

    s = state.copy()
    s.meta.perks[perk_id] = level + 1
    s.meta.spent_reputation += defn.cost_per_level
    return ActionResult.success(s)
