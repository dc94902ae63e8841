"""simulation/actions.py — Credit-spending player actions.

Each action returns an ``ActionResult``: the new state on success or
a ``NoopReason`` when the purchase can't happen.  The input state is
never modified.
"""

from __future__ import annotations

from components import SimulationState, unlocked
from core.data import Catalog, upgrade_cost
from core.tuning import EngineTuning
from simulation.result import ActionResult, NoopReason
from simulation.run_state import make_lane


def buy_upgrade(state: SimulationState, catalog: Catalog,
                upgrade_id: str) -> ActionResult:
    """Buy the next level of a hardware, software or module upgrade.

    Module upgrades also raise the target module's level, and need
    the module unlocked first.
    """
    defn = catalog.upgrades.get(upgrade_id)
    if defn is None:
        return ActionResult.noop(NoopReason.UNKNOWN_ID)

    level = state.upgrade_level(upgrade_id)
    if level >= defn.max_level:
        return ActionResult.noop(NoopReason.MAX_LEVEL)
    if defn.category == "module" and not unlocked(state.modules, defn.module):
        return ActionResult.noop(NoopReason.LOCKED)

    cost = upgrade_cost(defn, level)
    if not state.resources.can_afford(cost):
        return ActionResult.noop(NoopReason.INSUFFICIENT_FUNDS)

    s = state.copy()
    s.resources.spend(cost)
    s.upgrades[upgrade_id] = level + 1
    if defn.category == "module":
        s.modules[defn.module] = s.module_level(defn.module) + 1
    return ActionResult.success(s)


def unlock_module(state: SimulationState, catalog: Catalog,
                  module_id: str) -> ActionResult:
    """Unlock a module (level 0 → 1) and enable it on every lane."""
    defn = catalog.modules.get(module_id)
    if defn is None:
        return ActionResult.noop(NoopReason.UNKNOWN_ID)
    if unlocked(state.modules, module_id):
        return ActionResult.noop(NoopReason.ALREADY_UNLOCKED)
    if not state.resources.can_afford(defn.unlock_cost):
        return ActionResult.noop(NoopReason.INSUFFICIENT_FUNDS)

    s = state.copy()
    s.resources.spend(defn.unlock_cost)
    s.modules[module_id] = 1
    for lane in s.lanes:
        lane.enable(module_id)
    return ActionResult.success(s)


def toggle_module(state: SimulationState, lane_id: int,
                  module_id: str) -> ActionResult:
    """Enable or disable an unlocked module on one lane."""
    if state.find_lane(lane_id) is None:
        return ActionResult.noop(NoopReason.UNKNOWN_ID)
    if not unlocked(state.modules, module_id):
        return ActionResult.noop(NoopReason.LOCKED)

    s = state.copy()
    lane = s.find_lane(lane_id)
    if lane.has_module(module_id):
        lane.disable(module_id)
    else:
        lane.enable(module_id)
    return ActionResult.success(s)


def add_lane(state: SimulationState, tuning: EngineTuning) -> ActionResult:
    """Build another lane with every unlocked module enabled."""
    if len(state.lanes) >= tuning.max_lanes:
        return ActionResult.noop(NoopReason.LANE_LIMIT)

    cost = tuning.lane_cost(len(state.lanes))
    if not state.resources.can_afford(cost):
        return ActionResult.noop(NoopReason.INSUFFICIENT_FUNDS)

    s = state.copy()
    s.resources.spend(cost)
    enabled = [m for m, level in s.modules.items() if level > 0]
    next_id = max((lane.id for lane in s.lanes), default=-1) + 1
    s.lanes.append(make_lane(next_id, enabled))
    return ActionResult.success(s)


def switch_protocol(state: SimulationState, catalog: Catalog,
                    protocol_id: str) -> ActionResult:
    """Pay the one-time switch cost and change the active protocol."""
    defn = catalog.protocols.get(protocol_id)
    if defn is None:
        return ActionResult.noop(NoopReason.UNKNOWN_ID)
    if state.active_protocol == protocol_id:
        return ActionResult.noop(NoopReason.SAME_PROTOCOL)
    if not state.resources.can_afford(defn.switch_cost):
        return ActionResult.noop(NoopReason.INSUFFICIENT_FUNDS)

    s = state.copy()
    s.resources.spend(defn.switch_cost)
    s.active_protocol = protocol_id
    s.protocols_used.add(protocol_id)
    return ActionResult.success(s)
