"""
main.py — Headless bootstrap

1. Load tuning + content catalog
2. Restore the save slot (or start a fresh run)
3. Reconcile time spent away
4. Run N simulated seconds with a simple auto-play policy
5. Print a summary and save

Run:  python main.py --seconds 1800
"""

from __future__ import annotations
import argparse
import sys
import time

from core import tuning as core_tuning
from core.data import CatalogError, load_catalog, upgrade_cost
from core.save import load_state, save_state, should_autosave
from simulation.engine import Engine


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Headless progression runner")
    p.add_argument("--seconds", type=int, default=600,
                   help="simulated seconds to run after catch-up")
    p.add_argument("--slot", type=int, default=0, help="save slot")
    p.add_argument("--fresh", action="store_true",
                   help="ignore any existing save")
    p.add_argument("--no-save", action="store_true",
                   help="don't write the slot on exit")
    p.add_argument("--data", default=None,
                   help="content directory (default: data/)")
    return p.parse_args(argv)


def auto_play(engine: Engine, state):
    """One round of greedy decisions.  Returns the new state."""
    # Contracts
    if not state.contracts or engine.is_exhausted(state):
        state = engine.refresh_board(state)
    if state.active_contract_id is None:
        for c in state.contracts:
            res = engine.activate(state, c.id)
            if res:
                state = res.state
                print(f"[MAIN] Step {state.steps}: took contract {c.name or c.id}")
                break

    # Prestige
    if engine.readiness_check(state) and state.stats.playtime >= 900:
        gain = engine.reward_preview(state)
        state = engine.reset(state)
        print(f"[MAIN] Prestiged for {gain:g} reputation")
        for perk_id in engine.catalog.perks:
            res = engine.purchase_perk(state, perk_id)
            if res:
                state = res.state
                print(f"[MAIN] Bought perk {perk_id}")
        return engine.refresh_board(state)

    # Credits: unlock modules, then lanes, then the cheapest upgrade
    for module_id, level in state.modules.items():
        if level == 0:
            res = engine.unlock_module(state, module_id)
            if res:
                return res.state
    res = engine.add_lane(state)
    if res:
        print(f"[MAIN] Step {state.steps}: built lane {len(res.state.lanes)}")
        return res.state

    cheapest = None
    for uid, defn in engine.catalog.upgrades.items():
        level = state.upgrade_level(uid)
        if level >= defn.max_level:
            continue
        cost = upgrade_cost(defn, level)
        if cheapest is None or cost < cheapest[1]:
            cheapest = (uid, cost)
    if cheapest is not None:
        res = engine.buy_upgrade(state, cheapest[0])
        if res:
            return res.state
    return state


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # -- Config + content --
    core_tuning.load()
    try:
        catalog = load_catalog(args.data)
    except CatalogError as exc:
        print(f"[MAIN] Bad content data: {exc}")
        return 1
    engine = Engine(catalog, core_tuning.engine_tuning())

    # -- Restore or start --
    now = time.time()
    state = None
    if not args.fresh:
        try:
            state = load_state(args.slot, version=engine.tuning.save_version)
        except ValueError as exc:
            # version mismatch, corrupt JSON or a malformed payload
            print(f"[MAIN] Can't load slot {args.slot}: {exc}; "
                  f"start with --fresh to begin a new run")
            return 1
    if state is None:
        state = engine.new_run(now=now)
        print("[MAIN] Started a fresh run")
    else:
        state, summary = engine.reconcile(state, now)
        print(f"[MAIN] While you were away ({summary.elapsed_seconds:.0f}s): "
              f"+{summary.payload_earned:.0f} payload, "
              f"+{summary.credits_earned:.0f} credits, "
              f"+{summary.fragments_earned} fragments")

    # -- Run --
    for _ in range(args.seconds):
        state = engine.advance(state)
        state = auto_play(engine, state)
        if not args.no_save and should_autosave(state,
                                                engine.tuning.autosave_interval):
            save_state(state, args.slot, version=engine.tuning.save_version)

    # -- Summary --
    info = engine.debug_info(state)
    print(f"[MAIN] Step {state.steps} | resets {state.meta.reset_count} | "
          f"payload {state.stats.total_payload:.0f} | "
          f"credits {state.resources.credits:.0f} | "
          f"fragments {state.resources.fragments} | "
          f"lanes {len(state.lanes)} | protocol {info['protocol']} | "
          f"reputation {state.meta.available_reputation:g}")

    if not args.no_save:
        state.last_tick = time.time()
        save_state(state, args.slot, version=engine.tuning.save_version)
    return 0


if __name__ == "__main__":
    sys.exit(main())
