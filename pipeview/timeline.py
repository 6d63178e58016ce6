from collections import defaultdict

import pandas as pd

from .controller import SimulationController
from .decoder import instruction_label
from .driver import run_to_completion
from .pipeline import STAGES, STALL_STAGE, stage_index


def classify_cell(state, index, cycle):
    """What the view shows for instruction `index` in `cycle`.

    Returns "stall", "forward", a stage name, or None when the instruction
    is not in the pipeline.
    """
    report = state.report
    stalls = report.stalls[index]
    if stalls > 0:
        # stalls are spent right after the instruction's ID cycle
        id_cycle = index + STALL_STAGE + 1 + report.preceding_stalls(index)
        if id_cycle < cycle <= id_cycle + stalls:
            return "stall"

    idx = stage_index(report, index, cycle)
    if not 0 <= idx < state.stage_count:
        return None
    if STAGES[idx] == "EX" and report.forwardings[index]:
        return "forward"
    return STAGES[idx]


def build_timeline(states):
    """Instruction × cycle table of the stages actually occupied by a run.

    `states` is the sequence of snapshots observed while driving the run,
    one per cycle (repeated cycles, e.g. the final capped one, are ignored).
    """
    last = states[-1]
    num_cycles = last.max_cycles or last.current_cycle
    matrix = defaultdict(lambda: [''] * num_cycles)
    labels = [instruction_label(k, w) for k, w in enumerate(last.instructions)]

    seen = set()
    for state in states:
        c = state.current_cycle
        if c < 1 or c in seen or c > num_cycles:
            continue
        seen.add(c)
        for k, label in enumerate(labels):
            name = state.stage_name(k)
            matrix[label][c - 1] = name or ''

    df = pd.DataFrame.from_dict({label: matrix[label] for label in labels}, orient='index',
                                columns=[f"C{c}" for c in range(1, num_cycles + 1)])
    df.index.name = "instruction"
    return df


def simulate_table(words, forwarding_enabled=True):
    controller = SimulationController(forwarding_enabled)
    controller.start(words)
    return build_timeline(run_to_completion(controller))


def hazard_table(state):
    rows = []
    for k, word in enumerate(state.instructions):
        hazard = state.hazards[k]
        rows.append({
            "instruction": instruction_label(k, word),
            "hazard": hazard.kind.value,
            "stalls": state.stalls[k],
            "forwarding": ", ".join(f"I{f.from_index}.{f.from_stage}→{f.to_stage} {f.register}"
                                    for f in state.forwardings[k]),
            "description": hazard.description,
        })
    return pd.DataFrame(rows, columns=["instruction", "hazard", "stalls", "forwarding", "description"])
