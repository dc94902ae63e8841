"""components — Simulation state dataclasses, organised by domain.

Submodules
----------
resources   ResourcePool
lanes       Lane, unlocked()
contracts   Contract, ContractStatus
meta        MetaProgress, RunStats
protocols   ProtocolSet
state       SimulationState (the root value)

All public names are re-exported here so callers can write
``from components import SimulationState``.
"""

from components.resources import ResourcePool
from components.lanes import Lane, unlocked
from components.contracts import Contract, ContractStatus
from components.meta import MetaProgress, RunStats
from components.protocols import ProtocolSet
from components.state import SimulationState

__all__ = [
    "ResourcePool",
    "Lane", "unlocked",
    "Contract", "ContractStatus",
    "MetaProgress", "RunStats",
    "ProtocolSet",
    "SimulationState",
]
