"""
core/data.py — TOML → content catalog loader

Reads the content files and builds the read-only definition tables
the engine consumes.  The engine never embeds content values; it only
sees what a ``Catalog`` hands it.

You define the definition types here.
You define your content in .toml files under ``data/``.
This file connects them.

Usage:
    catalog = load_catalog()                    # data/*.toml
    catalog = load_catalog("path/to/content")   # custom directory
    catalog = Catalog.from_tables(modules=..., protocols=..., ...)

Malformed content raises ``CatalogError``; unknown extra keys are
ignored.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
import math
from pathlib import Path
from dataclasses import dataclass, field, fields


class CatalogError(ValueError):
    """Content data is missing, mistyped, or references unknown ids."""


UPGRADE_EFFECTS = frozenset({
    "capacity_flat", "queue_tolerance", "latency_reduction",
    "scrap_rate_mult", "credit_rate_mult", "fragment_interval_reduction",
})

PERK_EFFECTS = frozenset({
    "capacity_mult", "output_mult", "scrap_rate_mult", "latency_reduction",
    "credit_rate_mult", "fragment_interval_reduction", "extra_lanes",
    "offline_cap_hours",
})

UPGRADE_CATEGORIES = frozenset({"hardware", "software", "module"})
CONTRACT_TIERS = frozenset({"low", "mid", "high"})


# ═══════════════════════════════════════════════════════════════════
#  Definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ModuleDef:
    """A processing stage a lane can enable once unlocked."""
    id: str
    unlock_cost: float
    capacity_bonus: float
    output_multiplier: float
    capacity_per_level: float = 0.0
    output_per_level: float = 0.0
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class ProtocolDef:
    id: str
    throughput_multiplier: float
    credit_multiplier: float
    fragments_per_hundred: float
    required_modules: tuple[str, ...] = ()
    switch_cost: float = 0.0
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class UpgradeDef:
    """A leveled credit purchase.

    ``effects`` maps an effect kind to its value per purchased level.
    Module-category upgrades name their target in ``module`` and
    raise that module's level instead of carrying effects.
    """
    id: str
    category: str
    max_level: int
    base_cost: float
    cost_growth: float
    effects: dict[str, float] = field(default_factory=dict)
    module: str = ""
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class ContractTemplate:
    id: str
    protocol: str
    target: float
    reward_credits: float
    reward_fragments: int
    tier: str
    time_limit: float | None = None
    min_resets: int = 0
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class PerkDef:
    """A persistent upgrade bought with reputation."""
    id: str
    max_level: int
    cost_per_level: float
    effects: dict[str, float] = field(default_factory=dict)
    name: str = ""
    description: str = ""


def upgrade_cost(defn: UpgradeDef, current_level: int) -> float:
    """Credits for the next level: ``base * growth ** level``, halves up."""
    return float(math.floor(defn.base_cost * defn.cost_growth ** current_level
                            + 0.5))


# ═══════════════════════════════════════════════════════════════════
#  Catalog
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Catalog:
    """Read-only content tables, keyed by id in file order."""
    modules: dict[str, ModuleDef]
    protocols: dict[str, ProtocolDef]
    upgrades: dict[str, UpgradeDef]
    contract_templates: dict[str, ContractTemplate]
    perks: dict[str, PerkDef]

    @classmethod
    def from_tables(cls, *, modules: dict, protocols: dict,
                    upgrades: dict | None = None,
                    contracts: dict | None = None,
                    perks: dict | None = None) -> "Catalog":
        """Build and validate a catalog from raw ``{id: {field: value}}``
        tables (the shape ``tomllib`` returns)."""
        cat = cls(
            modules=_build_table(ModuleDef, modules, "module"),
            protocols=_build_table(ProtocolDef, protocols, "protocol"),
            upgrades=_build_table(UpgradeDef, upgrades or {}, "upgrade"),
            contract_templates=_build_table(ContractTemplate, contracts or {},
                                            "contract"),
            perks=_build_table(PerkDef, perks or {}, "perk"),
        )
        cat.validate()
        return cat

    def validate(self) -> None:
        """Check cross-references and value ranges."""
        if not self.protocols:
            raise CatalogError("catalog defines no protocols")
        for p in self.protocols.values():
            for m in p.required_modules:
                if m not in self.modules:
                    raise CatalogError(
                        f"protocol '{p.id}' requires unknown module '{m}'")
            if p.fragments_per_hundred <= 0:
                raise CatalogError(
                    f"protocol '{p.id}' fragments_per_hundred must be > 0")
        for u in self.upgrades.values():
            if u.category not in UPGRADE_CATEGORIES:
                raise CatalogError(
                    f"upgrade '{u.id}' has unknown category '{u.category}'")
            if u.max_level <= 0:
                raise CatalogError(f"upgrade '{u.id}' max_level must be > 0")
            if u.category == "module" and u.module not in self.modules:
                raise CatalogError(
                    f"upgrade '{u.id}' targets unknown module '{u.module}'")
            _check_effects(u.id, u.effects, UPGRADE_EFFECTS)
        for t in self.contract_templates.values():
            if t.protocol not in self.protocols:
                raise CatalogError(
                    f"contract '{t.id}' uses unknown protocol '{t.protocol}'")
            if t.tier not in CONTRACT_TIERS:
                raise CatalogError(
                    f"contract '{t.id}' has unknown tier '{t.tier}'")
        for k in self.perks.values():
            if k.max_level <= 0:
                raise CatalogError(f"perk '{k.id}' max_level must be > 0")
            _check_effects(k.id, k.effects, PERK_EFFECTS)

    def starting_modules(self) -> list[str]:
        """Modules that are free, hence unlocked at level 1 on a new run."""
        return [m.id for m in self.modules.values() if m.unlock_cost == 0]


def load_catalog(directory: str | Path | None = None) -> Catalog:
    """Load every content table from *directory*.

    Defaults to ``data/`` relative to the project root.  Each file's
    top-level tables become definitions keyed by table name::

        [decrypt]
        unlock_cost = 0
        capacity_bonus = 5.0
    """
    if directory is None:
        directory = Path(__file__).resolve().parent.parent / "data"
    directory = Path(directory)

    tables = {}
    for name in ("modules", "protocols", "upgrades", "contracts", "perks"):
        path = directory / f"{name}.toml"
        if not path.exists():
            raise CatalogError(f"missing content file {path}")
        with open(path, "rb") as f:
            tables[name] = tomllib.load(f)

    cat = Catalog.from_tables(**tables)
    print(f"[CATALOG] Loaded {len(cat.modules)} modules, "
          f"{len(cat.protocols)} protocols, {len(cat.upgrades)} upgrades, "
          f"{len(cat.contract_templates)} contracts, {len(cat.perks)} perks "
          f"from {directory}")
    return cat


# ── Builders ────────────────────────────────────────────────────────

_NUMERIC = (int, float)


def _build_table(defn_type: type, raw: dict, label: str) -> dict:
    table = {}
    for def_id, section in raw.items():
        if not isinstance(section, dict):
            raise CatalogError(f"{label} '{def_id}' must be a table")
        table[def_id] = _build_def(defn_type, def_id, section, label)
    return table


def _build_def(defn_type: type, def_id: str, kwargs: dict, label: str):
    """Build a definition dataclass, skipping unknown fields."""
    kwargs = dict(kwargs, id=def_id)
    valid = {f.name: f for f in fields(defn_type)}
    filtered = {k: v for k, v in kwargs.items() if k in valid}
    for f in valid.values():
        if f.name not in filtered:
            continue
        value = filtered[f.name]
        ftype = str(f.type)
        if ftype.startswith("float") or ftype == "int":
            if isinstance(value, bool) or not isinstance(value, _NUMERIC):
                raise CatalogError(
                    f"{label} '{def_id}' field '{f.name}' must be a number")
        if ftype == "int":
            filtered[f.name] = int(value)
        elif ftype.startswith("float"):
            filtered[f.name] = float(value)
        elif ftype.startswith("tuple"):
            if not isinstance(value, list):
                raise CatalogError(
                    f"{label} '{def_id}' field '{f.name}' must be a list")
            filtered[f.name] = tuple(value)
        elif ftype.startswith("dict"):
            if not isinstance(value, dict):
                raise CatalogError(
                    f"{label} '{def_id}' field '{f.name}' must be a table")
            filtered[f.name] = dict(value)
    try:
        return defn_type(**filtered)
    except TypeError as exc:
        raise CatalogError(f"{label} '{def_id}': {exc}") from exc


def _check_effects(owner: str, effects: dict, allowed: frozenset) -> None:
    for kind, value in effects.items():
        if kind not in allowed:
            raise CatalogError(f"'{owner}' has unknown effect '{kind}'")
        if isinstance(value, bool) or not isinstance(value, _NUMERIC):
            raise CatalogError(f"'{owner}' effect '{kind}' must be a number")
