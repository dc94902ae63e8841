"""simulation/engine.py — Top-level engine facade.

Binds an injected ``Catalog`` and ``EngineTuning`` so callers (the
runner, a UI) don't have to pass them on every call.

Usage::

    engine = Engine(load_catalog(), tuning.engine_tuning())
    state = engine.new_run(now=time.time())
    state = engine.refresh_board(state)

    # per second:
    state = engine.advance(state)

    # on launch:
    state, summary = engine.reconcile(state, time.time())

The engine holds no run state of its own.  Callers keep the current
``SimulationState`` and must not advance the same value from two
places at once.
"""

from __future__ import annotations

from components import SimulationState
from core.data import Catalog
from core.tuning import EngineTuning
from simulation import actions, contracts, prestige, replay, tick
from simulation.result import ActionResult
from simulation.run_state import new_run
from simulation.throughput import (
    lane_throughput, raw_input_rate, credit_rate, drop_interval,
)


class Engine:
    """Entry points consumed by front ends."""

    def __init__(self, catalog: Catalog,
                 tuning: EngineTuning | None = None) -> None:
        self.catalog = catalog
        self.tuning = tuning or EngineTuning()

    # ── Run lifecycle ────────────────────────────────────────────────

    def new_run(self, now: float = 0.0) -> SimulationState:
        return new_run(self.catalog, self.tuning, now=now)

    def advance(self, state: SimulationState,
                dt: float = 1.0) -> SimulationState:
        return tick.advance(state, self.catalog, self.tuning, dt)

    def reconcile(self, state: SimulationState,
                  now: float) -> tuple[SimulationState, replay.ReplaySummary]:
        return replay.reconcile(state, now, self.catalog, self.tuning)

    # ── Contracts ────────────────────────────────────────────────────

    def refresh_board(self, state: SimulationState) -> SimulationState:
        return contracts.refresh_board(state, self.catalog, self.tuning)

    def activate(self, state: SimulationState,
                 contract_id: str) -> ActionResult:
        return contracts.activate(state, contract_id)

    def is_exhausted(self, state: SimulationState) -> bool:
        return contracts.is_exhausted(state)

    # ── Prestige ─────────────────────────────────────────────────────

    def readiness_check(self, state: SimulationState) -> bool:
        return prestige.can_prestige(state, self.tuning)

    def reward_preview(self, state: SimulationState) -> float:
        return prestige.reputation_gain(state, self.tuning)

    def reset(self, state: SimulationState,
              now: float | None = None) -> SimulationState:
        return prestige.reset(state, self.catalog, self.tuning, now)

    def purchase_perk(self, state: SimulationState,
                      perk_id: str) -> ActionResult:
        return prestige.purchase_perk(state, self.catalog, perk_id)

    # ── Spending ─────────────────────────────────────────────────────

    def buy_upgrade(self, state: SimulationState,
                    upgrade_id: str) -> ActionResult:
        return actions.buy_upgrade(state, self.catalog, upgrade_id)

    def unlock_module(self, state: SimulationState,
                      module_id: str) -> ActionResult:
        return actions.unlock_module(state, self.catalog, module_id)

    def toggle_module(self, state: SimulationState, lane_id: int,
                      module_id: str) -> ActionResult:
        return actions.toggle_module(state, lane_id, module_id)

    def add_lane(self, state: SimulationState) -> ActionResult:
        return actions.add_lane(state, self.tuning)

    def switch_protocol(self, state: SimulationState,
                        protocol_id: str) -> ActionResult:
        return actions.switch_protocol(state, self.catalog, protocol_id)

    # ── Queries ──────────────────────────────────────────────────────

    def debug_info(self, state: SimulationState) -> dict:
        """Rates and per-lane numbers for a status display."""
        return {
            "steps": state.steps,
            "protocol": state.active_protocol,
            "raw_input_rate": raw_input_rate(state, self.catalog, self.tuning),
            "credit_rate": credit_rate(state, self.catalog),
            "drop_interval": drop_interval(state, self.catalog, self.tuning),
            "lanes": [
                {
                    "id": lane.id,
                    "queue": lane.queue,
                    "heat": lane.heat,
                    "capacity": lane_throughput(lane, state, self.catalog,
                                                self.tuning).capacity,
                }
                for lane in state.lanes
            ],
            "prestige_ready": self.readiness_check(state),
            "reward_preview": self.reward_preview(state),
        }
