"""components.contracts — Contract (objective) records on the board.

Lifecycle::

    OPEN ──activate──▶ ACTIVE ──target met──▶ COMPLETED
                          └────time out────▶ EXPIRED

Terminal contracts never return to ACTIVE; only a board refresh
brings new OPEN instances.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class ContractStatus(str, Enum):
    OPEN = "open"
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"


@dataclass
class Contract:
    """One board entry, instantiated from a ``ContractTemplate``."""
    id: str
    protocol: str
    target: float
    reward_credits: float = 0.0
    reward_fragments: int = 0
    tier: str = "low"
    time_limit: float | None = None
    time_remaining: float | None = None
    progress: float = 0.0
    status: ContractStatus = ContractStatus.OPEN
    name: str = ""
    description: str = ""

    @property
    def active(self) -> bool:
        return self.status is ContractStatus.ACTIVE

    @property
    def finished(self) -> bool:
        """Completed (target met) or expired."""
        return (self.status in (ContractStatus.COMPLETED, ContractStatus.EXPIRED)
                or self.progress >= self.target)

    def copy(self) -> "Contract":
        return Contract(
            id=self.id, protocol=self.protocol, target=self.target,
            reward_credits=self.reward_credits,
            reward_fragments=self.reward_fragments, tier=self.tier,
            time_limit=self.time_limit, time_remaining=self.time_remaining,
            progress=self.progress, status=self.status,
            name=self.name, description=self.description,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "protocol": self.protocol,
            "target": self.target,
            "reward_credits": self.reward_credits,
            "reward_fragments": self.reward_fragments,
            "tier": self.tier,
            "time_limit": self.time_limit,
            "time_remaining": self.time_remaining,
            "progress": self.progress,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Contract":
        return cls(
            id=data["id"],
            protocol=data["protocol"],
            target=float(data["target"]),
            reward_credits=float(data.get("reward_credits", 0.0)),
            reward_fragments=int(data.get("reward_fragments", 0)),
            tier=data.get("tier", "low"),
            time_limit=data.get("time_limit"),
            time_remaining=data.get("time_remaining"),
            progress=float(data.get("progress", 0.0)),
            status=ContractStatus(data.get("status", "open")),
            name=data.get("name", ""),
            description=data.get("description", ""),
        )
