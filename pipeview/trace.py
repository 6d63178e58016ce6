"""Write a simulated run as a VCD waveform and read it back.

One 8-bit wire per instruction holds the index of the stage it occupies
(x while it is outside the pipeline). A clock rises at the start of every
cycle, so a reader samples the wires on rising edges.
"""
import logging
import os
import re
from collections import defaultdict
from datetime import datetime

import pandas as pd
from vcd.writer import VCDWriter
from vcdvcd import VCDVCD

from .errors import TraceError
from .pipeline import STAGES

logger = logging.getLogger(__name__)

SCOPE = "pipeline"
CYCLE_NS = 10


def write_vcd(states, path):
    """Dump the per-cycle stage of every instruction seen in `states`."""
    last = states[-1]
    num_instr = len(last.instructions)
    with open(path, "w", encoding="utf-8") as fh:
        with VCDWriter(fh, timescale='1 ns', date=datetime.now().strftime('%Y-%m-%d'),
                       comment='Pipeline trace') as writer:
            clk = writer.register_var(SCOPE, 'clk', 'wire', size=1, init=0)
            stall = writer.register_var(SCOPE, 'stall', 'wire', size=8, init=0)
            instr = [writer.register_var(SCOPE, f'instr_{k}', 'wire', size=8) for k in range(num_instr)]

            seen = set()
            for state in states:
                c = state.current_cycle
                if c < 1 or c in seen:
                    continue
                seen.add(c)
                t_ns = c * CYCLE_NS
                for k, var in enumerate(instr):
                    stage = state.stages[k]
                    writer.change(var, t_ns, 'x' if stage is None else stage)
                writer.change(stall, t_ns, state.stall_cycles_remaining)
                writer.change(clk, t_ns, 1)
                writer.change(clk, t_ns + CYCLE_NS // 2, 0)
    logger.debug("Wrote %d cycles to %s", len(seen), path)


def _rising_edges(vcd, clock_signal):
    rising_edges = []
    prev_val = '0'
    for t, val in sorted(vcd[clock_signal].tv, key=lambda x: x[0]):
        if prev_val == '0' and val == '1':
            rising_edges.append(t)
        prev_val = val
    return rising_edges


def _sample(vcd, signal_name, rising_edges):
    values = []
    tv_sorted = sorted(vcd[signal_name].tv, key=lambda x: x[0])
    tv_idx = 0
    last_val = None
    for rise_time in rising_edges:
        while tv_idx < len(tv_sorted) and tv_sorted[tv_idx][0] <= rise_time:
            last_val = tv_sorted[tv_idx][1]
            tv_idx += 1
        val = None
        raw = str(last_val or '').lstrip('b')
        if raw and all(ch in '01' for ch in raw):
            val = int(raw, 2)
        values.append(val)
    return values


def read_vcd(path):
    """Replay a trace written by write_vcd.

    Returns {"num_cycles", "stages": {index: [stage or None per cycle]},
    "stall": [...]}.
    """
    if not os.path.exists(path):
        raise TraceError(f"VCD file not found: {path}")
    vcd = VCDVCD(path, store_tvs=True)

    candidates = [sig for sig in vcd.signals if sig.split('.')[-1] in ('clk', 'clock')]
    if not candidates:
        raise TraceError(f"No clock signal found in {path}.")
    rising_edges = _rising_edges(vcd, candidates[0])

    stages = {}
    stall = [0] * len(rising_edges)
    for sig in vcd.signals:
        name = sig.split('.')[-1].split('[')[0]
        m = re.fullmatch(r'instr_(\d+)', name)
        if m:
            stages[int(m.group(1))] = _sample(vcd, sig, rising_edges)
        elif name == 'stall':
            stall = [v or 0 for v in _sample(vcd, sig, rising_edges)]

    return {
        "num_cycles": len(rising_edges),
        "stages": dict(sorted(stages.items())),
        "stall": stall,
    }


def trace_table(trace):
    matrix = defaultdict(lambda: [''] * trace["num_cycles"])
    for k, seq in trace["stages"].items():
        matrix[f"I{k}"] = [STAGES[s] if s is not None and s < len(STAGES) else '' for s in seq]
    df = pd.DataFrame.from_dict(dict(matrix), orient='index',
                                columns=[f"C{c}" for c in range(1, trace["num_cycles"] + 1)])
    df.index.name = "instruction"
    return df
