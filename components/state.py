"""components.state — The root simulation state.

Every engine call takes a ``SimulationState`` and returns a new one.
``copy()`` rebuilds each substructure explicitly, so the output of an
engine call never shares a list, dict or record with its input.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from components.resources import ResourcePool
from components.lanes import Lane
from components.contracts import Contract
from components.meta import MetaProgress, RunStats
from components.protocols import ProtocolSet


@dataclass
class SimulationState:
    """Everything a run needs, threaded through every engine call.

    ``last_tick`` is the wall-clock time (epoch seconds) of the last
    reconcile; only the replay reconciler reads it.
    """
    resources: ResourcePool = field(default_factory=ResourcePool)
    lanes: list[Lane] = field(default_factory=list)
    modules: dict[str, int] = field(default_factory=dict)
    active_protocol: str = ""
    upgrades: dict[str, int] = field(default_factory=dict)
    contracts: list[Contract] = field(default_factory=list)
    active_contract_id: str | None = None
    protocols_used: ProtocolSet = field(default_factory=ProtocolSet)
    meta: MetaProgress = field(default_factory=MetaProgress)
    stats: RunStats = field(default_factory=RunStats)
    steps: int = 0
    last_tick: float = 0.0

    # ── Queries ──────────────────────────────────────────────────────

    def module_level(self, module_id: str) -> int:
        return self.modules.get(module_id, 0)

    def upgrade_level(self, upgrade_id: str) -> int:
        return self.upgrades.get(upgrade_id, 0)

    def find_contract(self, contract_id: str) -> Contract | None:
        for c in self.contracts:
            if c.id == contract_id:
                return c
        return None

    def find_lane(self, lane_id: int) -> Lane | None:
        for lane in self.lanes:
            if lane.id == lane_id:
                return lane
        return None

    def active_contract(self) -> Contract | None:
        if self.active_contract_id is None:
            return None
        return self.find_contract(self.active_contract_id)

    # ── Copying ──────────────────────────────────────────────────────

    def copy(self) -> "SimulationState":
        """Independent structural copy (no aliasing with ``self``)."""
        return SimulationState(
            resources=self.resources.copy(),
            lanes=[lane.copy() for lane in self.lanes],
            modules=dict(self.modules),
            active_protocol=self.active_protocol,
            upgrades=dict(self.upgrades),
            contracts=[c.copy() for c in self.contracts],
            active_contract_id=self.active_contract_id,
            protocols_used=self.protocols_used.copy(),
            meta=self.meta.copy(),
            stats=self.stats.copy(),
            steps=self.steps,
            last_tick=self.last_tick,
        )

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Plain JSON-ready dict; the protocol set becomes a list."""
        return {
            "resources": self.resources.to_dict(),
            "lanes": [lane.to_dict() for lane in self.lanes],
            "modules": dict(self.modules),
            "active_protocol": self.active_protocol,
            "upgrades": dict(self.upgrades),
            "contracts": [c.to_dict() for c in self.contracts],
            "active_contract_id": self.active_contract_id,
            "protocols_used": self.protocols_used.to_list(),
            "meta": self.meta.to_dict(),
            "stats": self.stats.to_dict(),
            "steps": self.steps,
            "last_tick": self.last_tick,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationState":
        return cls(
            resources=ResourcePool.from_dict(data.get("resources", {})),
            lanes=[Lane.from_dict(d) for d in data.get("lanes", [])],
            modules={k: int(v) for k, v in data.get("modules", {}).items()},
            active_protocol=data.get("active_protocol", ""),
            upgrades={k: int(v) for k, v in data.get("upgrades", {}).items()},
            contracts=[Contract.from_dict(d) for d in data.get("contracts", [])],
            active_contract_id=data.get("active_contract_id"),
            protocols_used=ProtocolSet(data.get("protocols_used", [])),
            meta=MetaProgress.from_dict(data.get("meta", {})),
            stats=RunStats.from_dict(data.get("stats", {})),
            steps=int(data.get("steps", 0)),
            last_tick=float(data.get("last_tick", 0.0)),
        )
