"""simulation/tick.py — The fixed-step state advance.

``advance(state, catalog, tuning, dt)`` is pure and deterministic:
the same inputs always give an identical new state, the input is
never touched, and nothing here reads the clock or a random source.

Step order
----------
1. copy state, bump step counter and playtime
2. generate raw input, split evenly across lanes
3. per lane: enqueue, process up to ``capacity * dt``, latency from
   the post-processing queue, payload = processed * mult * penalty
4. add payload and credits
5. fragment drop every ``drop_interval`` steps
6. active contract: progress, then expiry, then completion
   (completion wins a same-step tie)
7. stamp prestige readiness the first time the threshold is crossed

Rates scale linearly with ``dt``; the replay reconciler relies on
that to advance whole minutes in one call.
"""

from __future__ import annotations

from components import ContractStatus, SimulationState
from core.data import Catalog
from core.tuning import EngineTuning
from simulation.latency import calculate_latency
from simulation.throughput import (
    lane_throughput, raw_input_rate, credit_rate, drop_interval,
    queue_tolerance, latency_reduction,
)


def advance(state: SimulationState, catalog: Catalog, tuning: EngineTuning,
            dt: float = 1.0) -> SimulationState:
    """Advance the whole state by *dt* simulated seconds."""
    s = state.copy()
    s.steps += 1
    s.stats.playtime += dt

    # ── 1. Raw input ─────────────────────────────────────────────────
    generated = raw_input_rate(state, catalog, tuning) * dt
    per_lane = generated / len(s.lanes) if s.lanes else 0.0
    s.resources.scrap += generated if s.lanes else 0.0

    # ── 2. Per-lane processing ───────────────────────────────────────
    # Throughput reads the pre-step snapshot so lane order can't bias it.
    tolerance = queue_tolerance(state, catalog)
    reduction = latency_reduction(state, catalog, tuning)

    payload = 0.0
    for before, lane in zip(state.lanes, s.lanes):
        tp = lane_throughput(before, state, catalog, tuning)

        lane.queue += per_lane
        processed = min(lane.queue, tp.capacity * dt)
        lane.queue = max(0.0, lane.queue - processed)

        info = calculate_latency(tp.active_modules, lane.queue,
                                 tolerance, reduction, tuning)
        lane.heat = max(0.0, 1.0 - info.penalty)

        payload += processed * tp.output_multiplier * info.penalty

    # ── 3. Payload & credits ─────────────────────────────────────────
    s.resources.payload += payload
    s.stats.total_payload += payload

    credits = payload * credit_rate(state, catalog)
    s.resources.credits += credits
    s.stats.total_credits += credits

    # ── 4. Fragment drops ────────────────────────────────────────────
    if s.steps % drop_interval(state, catalog, tuning) == 0:
        s.resources.fragments += 1

    # ── 5. Contract progress ─────────────────────────────────────────
    contract = s.active_contract()
    if contract is not None and contract.active:
        contract.progress += payload

        if contract.time_remaining is not None:
            contract.time_remaining = max(0.0, contract.time_remaining - dt)
            if contract.time_remaining <= 0:
                contract.status = ContractStatus.EXPIRED
                s.active_contract_id = None

        if contract.progress >= contract.target:
            contract.status = ContractStatus.COMPLETED
            s.resources.credits += contract.reward_credits
            s.resources.fragments += contract.reward_fragments
            s.stats.total_credits += contract.reward_credits
            s.stats.contracts_completed += 1
            if contract.tier == tuning.high_tier:
                s.stats.high_tier_completed += 1
            s.active_contract_id = None

    # ── 6. Prestige readiness ────────────────────────────────────────
    if (s.stats.prestige_ready_at is None
            and s.stats.total_payload >= tuning.prestige_threshold):
        s.stats.prestige_ready_at = s.steps

    return s
