"""core/save.py — Simulation state persistence.

Save files (JSON) hold one versioned envelope::

    {"version": 1, "data": {...SimulationState.to_dict()...}}

Content catalogs and tuning are never saved; they are reloaded from
``data/`` on launch.  The protocols-used set is stored as an ordered
list and rebuilt as a ``ProtocolSet`` on load.

A version mismatch raises ``SaveVersionError``; a missing or malformed
payload raises ``SaveFormatError``.  Both are ``ValueError``s, as is
corrupt JSON.  There is no migration: the caller decides whether to
start a fresh run.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any

from components import SimulationState
from core.constants import SAVE_VERSION, AUTOSAVE_INTERVAL


SAVES_DIR = Path("saves")


class SaveVersionError(ValueError):
    """The envelope's version tag doesn't match this build."""

    def __init__(self, expected: int, found: Any) -> None:
        super().__init__(f"save version mismatch: expected {expected}, "
                         f"got {found!r}")
        self.expected = expected
        self.found = found


class SaveFormatError(ValueError):
    """The save parsed but its payload isn't a usable state."""


def get_save_file(slot: int = 0) -> Path:
    """Get the path for a save slot."""
    SAVES_DIR.mkdir(parents=True, exist_ok=True)
    return SAVES_DIR / f"slot{slot}.json"


# ── Envelope ─────────────────────────────────────────────────────────

def to_envelope(state: SimulationState,
                version: int = SAVE_VERSION) -> dict[str, Any]:
    return {"version": version, "data": state.to_dict()}


def from_envelope(envelope: dict[str, Any],
                  version: int = SAVE_VERSION) -> SimulationState:
    found = envelope.get("version") if isinstance(envelope, dict) else None
    if found != version:
        raise SaveVersionError(version, found)
    data = envelope.get("data")
    if not isinstance(data, dict):
        raise SaveFormatError("save envelope has no 'data' table")
    try:
        return SimulationState.from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SaveFormatError(f"malformed save data: {exc!r}") from exc


def save_to_string(state: SimulationState,
                   version: int = SAVE_VERSION) -> str:
    return json.dumps(to_envelope(state, version), indent=2)


def load_from_string(text: str,
                     version: int = SAVE_VERSION) -> SimulationState:
    return from_envelope(json.loads(text), version)


# ── Files ────────────────────────────────────────────────────────────

def save_state(state: SimulationState, slot: int = 0,
               path: str | Path | None = None,
               version: int = SAVE_VERSION) -> Path:
    """Write *state* to a save slot (or an explicit *path*).

    Returns path to save file.
    """
    save_path = Path(path) if path is not None else get_save_file(slot)
    with open(save_path, "w") as f:
        f.write(save_to_string(state, version))
    print(f"[SAVE] Wrote step {state.steps} to {save_path}")
    return save_path


def load_state(slot: int = 0, path: str | Path | None = None,
               version: int = SAVE_VERSION) -> SimulationState | None:
    """Load a save slot (or an explicit *path*).

    Returns None if the save file doesn't exist.  Version mismatches
    and corrupt JSON propagate to the caller.
    """
    save_path = Path(path) if path is not None else get_save_file(slot)
    if not save_path.exists():
        return None

    with open(save_path, "r") as f:
        state = load_from_string(f.read(), version)
    print(f"[SAVE] Loaded step {state.steps} from {save_path}")
    return state


def should_autosave(state: SimulationState,
                    interval: int = AUTOSAVE_INTERVAL) -> bool:
    """True every *interval* steps."""
    return interval > 0 and state.steps > 0 and state.steps % interval == 0
