"""simulation/contracts.py — Contract board lifecycle.

The board holds a handful of contracts drawn from the catalog's
templates.  At most one is ACTIVE at a time; progress and expiry are
applied by the tick engine, not here.

Board generation is a pure function of ``(reset_count, seed)``:

1. Keep templates whose ``min_resets`` gate is met.
2. Order them by an md5 hash of ``id + seed`` (stable sort).
3. Walk that order picking one template per protocol family; once
   the families run out, fill the remaining slots in the same order.
"""

from __future__ import annotations
import hashlib

from components import Contract, ContractStatus, SimulationState
from core.data import Catalog, ContractTemplate
from core.tuning import EngineTuning
from simulation.result import ActionResult, NoopReason


def _seed_hash(template_id: str, seed: int) -> int:
    h = hashlib.md5(f"{template_id}{seed}".encode()).hexdigest()
    return int(h[:8], 16)


def board_seed(state: SimulationState, tuning: EngineTuning) -> int:
    """Seed for the next refresh: step counter mixed with reset count."""
    return state.steps ^ (state.meta.reset_count * tuning.board_seed_stride)


def generate_board(catalog: Catalog, reset_count: int, seed: int,
                   size: int = 3) -> list[Contract]:
    """Deterministic board of up to *size* fresh OPEN contracts."""
    available = [t for t in catalog.contract_templates.values()
                 if t.min_resets <= reset_count]
    shuffled = sorted(available, key=lambda t: _seed_hash(t.id, seed))

    chosen: list[ContractTemplate] = []
    seen: set[str] = set()
    for t in shuffled:
        if len(chosen) >= size:
            break
        if t.protocol in seen:
            continue
        chosen.append(t)
        seen.add(t.protocol)
    if len(chosen) < size:
        for t in shuffled:
            if len(chosen) >= size:
                break
            if t not in chosen:
                chosen.append(t)
    chosen.sort(key=shuffled.index)

    return [_instantiate(t, seed, i) for i, t in enumerate(chosen)]


def _instantiate(t: ContractTemplate, seed: int, slot: int) -> Contract:
    return Contract(
        id=f"{t.id}_run{seed}_{slot}",
        protocol=t.protocol,
        target=t.target,
        reward_credits=t.reward_credits,
        reward_fragments=t.reward_fragments,
        tier=t.tier,
        time_limit=t.time_limit,
        time_remaining=t.time_limit,
        name=t.name,
        description=t.description,
    )


def refresh_board(state: SimulationState, catalog: Catalog,
                  tuning: EngineTuning) -> SimulationState:
    """Replace the board with a freshly generated one.

    Always clears the active pointer.
    """
    s = state.copy()
    seed = board_seed(state, tuning)
    s.contracts = generate_board(catalog, s.meta.reset_count, seed,
                                 tuning.board_size)
    s.active_contract_id = None
    print(f"[BOARD] Refreshed (seed={seed}): "
          f"{', '.join(c.id for c in s.contracts) or 'no contracts'}")
    return s


def activate(state: SimulationState, contract_id: str) -> ActionResult:
    """Start working on an OPEN contract.

    No-op when the contract is unknown, not OPEN, already has progress,
    or another contract is running.
    """
    contract = state.find_contract(contract_id)
    if contract is None:
        return ActionResult.noop(NoopReason.UNKNOWN_ID)
    if contract.status is not ContractStatus.OPEN or contract.progress > 0:
        return ActionResult.noop(NoopReason.NOT_OPEN)
    if state.active_contract_id is not None:
        return ActionResult.noop(NoopReason.ALREADY_ACTIVE)

    s = state.copy()
    s.find_contract(contract_id).status = ContractStatus.ACTIVE
    s.active_contract_id = contract_id
    return ActionResult.success(s)


def is_exhausted(state: SimulationState) -> bool:
    """True when every contract is completed or expired and none runs."""
    return (len(state.contracts) > 0
            and all(not c.active and c.finished for c in state.contracts))
