"""simulation/result.py — Tagged results for player actions.

Expected failures (can't afford it, wrong id, already running) are
not exceptions.  Actions return an ``ActionResult``::

    res = activate(state, "tpl_burst_low_1_run42_0")
    if res:
        state = res.state
    else:
        print(res.reason)          # NoopReason.ALREADY_ACTIVE

A no-op never carries a partial state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from components import SimulationState


class NoopReason(str, Enum):
    UNKNOWN_ID = "unknown_id"
    ALREADY_ACTIVE = "already_active"          # another contract is running
    NOT_OPEN = "not_open"                      # active, expired or has progress
    MAX_LEVEL = "max_level"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    SAME_PROTOCOL = "same_protocol"
    LANE_LIMIT = "lane_limit"
    LOCKED = "locked"
    ALREADY_UNLOCKED = "already_unlocked"


@dataclass(frozen=True)
class ActionResult:
    state: "SimulationState | None" = None
    reason: NoopReason | None = None

    @classmethod
    def success(cls, state: "SimulationState") -> "ActionResult":
        return cls(state=state)

    @classmethod
    def noop(cls, reason: NoopReason) -> "ActionResult":
        return cls(reason=reason)

    @property
    def ok(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap_or(self, fallback: "SimulationState") -> "SimulationState":
        """New state on success, *fallback* on a no-op."""
        return self.state if self.state is not None else fallback
