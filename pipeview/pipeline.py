"""Cycle-by-cycle stage assignment for the 5-stage pipeline.

Every function here is a reducer: it takes a PipelineState and returns a new
one. The simulation controller is the only place that keeps a state around.
"""
import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from .decoder import DecodedInstruction, decode_all
from .hazards import HazardReport, analyze

logger = logging.getLogger(__name__)

STAGES = ("IF", "ID", "EX", "MEM", "WB")
STAGE_COUNT = len(STAGES)
# An instruction with pending stalls holds the pipeline when it leaves ID
STALL_STAGE = STAGES.index("ID")


@dataclass(frozen=True)
class PipelineState:
    instructions: Tuple[int, ...] = ()
    decoded: Tuple[DecodedInstruction, ...] = ()
    report: HazardReport = HazardReport()
    current_cycle: int = 0
    max_cycles: int = 0
    stage_count: int = STAGE_COUNT
    stages: Tuple[Optional[int], ...] = ()
    running: bool = False
    finished: bool = False
    stall_cycles_remaining: int = 0
    forwarding_enabled: bool = True

    @property
    def started(self) -> bool:
        return self.current_cycle > 0

    @property
    def paused(self) -> bool:
        return self.started and not self.running and not self.finished

    @property
    def stalled(self) -> bool:
        return self.stall_cycles_remaining > 0

    @property
    def hazards(self):
        return self.report.hazards

    @property
    def forwardings(self):
        return self.report.forwardings

    @property
    def stalls(self):
        return self.report.stalls

    @property
    def total_stall_cycles(self) -> int:
        return self.report.total_stall_cycles

    def stage_name(self, index: int) -> Optional[str]:
        stage = self.stages[index]
        return None if stage is None else STAGES[stage]


def completion_cycle(num_instructions: int, total_stall_cycles: int, stage_count: int = STAGE_COUNT) -> int:
    if num_instructions == 0:
        return 0
    return num_instructions + stage_count - 1 + total_stall_cycles


def stage_index(report: HazardReport, index: int, cycle: int) -> int:
    """Stage an instruction would occupy in `cycle` if nothing froze it."""
    return cycle - index - 1 - report.preceding_stalls(index)


def stage_mapping(report: HazardReport, num_instructions: int, cycle: int,
                  stage_count: int = STAGE_COUNT) -> Tuple[Tuple[Optional[int], ...], int]:
    """Return (stages, stall) for `cycle`.

    `stall` is the stall count of the first instruction found about to leave
    ID with stalls pending, 0 if there is none.
    """
    stages = []
    stall = 0
    preceding = 0
    for k in range(num_instructions):
        idx = cycle - k - 1 - preceding
        if 0 <= idx < stage_count:
            stages.append(idx)
            if idx == STALL_STAGE and report.stalls[k] > 0 and stall == 0:
                stall = report.stalls[k]
        else:
            stages.append(None)
        preceding += report.stalls[k]
    return tuple(stages), stall


def start(instructions: Sequence[int], forwarding_enabled: bool = True) -> PipelineState:
    """Decode and analyze `instructions` once and return the state for cycle 1."""
    words = tuple(w & 0xFFFFFFFF for w in instructions)
    decoded = decode_all(words)
    report = analyze(decoded, forwarding_enabled)
    stages, _ = stage_mapping(report, len(words), 1)
    state = PipelineState(
        instructions=words,
        decoded=decoded,
        report=report,
        current_cycle=1,
        max_cycles=completion_cycle(len(words), report.total_stall_cycles),
        stages=stages,
        running=True,
        forwarding_enabled=forwarding_enabled,
    )
    logger.debug("Started run of %d instructions, completion at cycle %d", len(words), state.max_cycles)
    return state


def reset(forwarding_enabled: bool = True) -> PipelineState:
    return PipelineState(forwarding_enabled=forwarding_enabled)


def pause(state: PipelineState) -> PipelineState:
    if not state.running:
        return state
    return replace(state, running=False)


def resume(state: PipelineState) -> PipelineState:
    if state.running or not state.started or state.finished:
        return state
    return replace(state, running=True)


def advance(state: PipelineState) -> PipelineState:
    """Advance the run by one clock cycle.

    A no-op unless the run is running and not finished. While a stall is
    active the whole pipeline stays frozen and only the cycle moves.
    """
    if not state.running or state.finished:
        return state

    next_cycle = state.current_cycle + 1

    if state.stall_cycles_remaining > 0:
        return replace(state, current_cycle=next_cycle,
                       stall_cycles_remaining=state.stall_cycles_remaining - 1)

    stages, stall = stage_mapping(state.report, len(state.instructions), next_cycle, state.stage_count)
    if stall:
        logger.debug("Cycle %d: stalling pipeline for %d cycle(s)", next_cycle, stall)

    if next_cycle > state.max_cycles:
        logger.debug("Run finished at cycle %d", state.max_cycles)
        return replace(state, current_cycle=state.max_cycles, stages=stages,
                       running=False, finished=True, stall_cycles_remaining=0)

    return replace(state, current_cycle=next_cycle, stages=stages, stall_cycles_remaining=stall)
