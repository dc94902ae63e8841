"""simulation — The deterministic progression engine.

Raw input flows through each lane's modules, turns into payload under
a latency penalty, pays credits, feeds the active contract, and
eventually unlocks a prestige reset.

Submodules
----------
latency      calculate_latency — depth + congestion → penalty
throughput   lane_throughput, raw_input_rate, credit_rate, drop_interval
contracts    Board generation, activation, exhaustion
tick         advance — the pure per-step state advance
prestige     Readiness, reputation reward, reset, perk purchase
replay       reconcile — offline catch-up in fixed chunks
actions      Upgrades, module unlocks/toggles, lanes, protocol switch
run_state    new_run — run-start defaults
result       ActionResult, NoopReason
engine       Engine — facade binding catalog + tuning
"""
