"""Data hazard analysis for a 5-stage pipeline.

Each instruction is checked against at most the two instructions ahead of
it. With forwarding the result of a producer is available at the end of its
EX stage, so anything further back has already been written by the time the
consumer reaches EX. If the stage count or the forwarding point changes,
LOOKBACK has to be derived again.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .decoder import InstructionKind

logger = logging.getLogger(__name__)

LOOKBACK = 2
# Stalls needed without forwarding for a producer `distance` slots back
STALL_BASE = LOOKBACK + 1


class HazardKind(Enum):
    NONE = "NONE"
    RAW = "RAW"
    WAW = "WAW"


@dataclass(frozen=True)
class HazardRecord:
    kind: HazardKind = HazardKind.NONE
    description: str = "No hazard"
    forwardable: bool = False
    stall_cycles: int = 0


NO_HAZARD = HazardRecord()


@dataclass(frozen=True)
class ForwardingEdge:
    from_index: int
    to_index: int
    from_stage: str
    to_stage: str
    register: str


@dataclass(frozen=True)
class HazardReport:
    hazards: Tuple[HazardRecord, ...] = ()
    forwardings: Tuple[Tuple[ForwardingEdge, ...], ...] = ()
    stalls: Tuple[int, ...] = ()
    forwarding_enabled: bool = True

    @property
    def total_stall_cycles(self) -> int:
        return sum(self.stalls)

    def preceding_stalls(self, index: int) -> int:
        return sum(self.stalls[:index])


@dataclass(frozen=True)
class HazardSummary:
    hazard_count: int
    stall_count: int
    forwarding_count: int


@dataclass(frozen=True)
class _RawMatch:
    source: str  # "rs" or "rt"
    register: int
    from_index: int
    distance: int


def _find_raw_matches(decoded, i) -> List[_RawMatch]:
    current = decoded[i]
    matches = []
    for j in range(max(0, i - LOOKBACK), i):
        producer = decoded[j]
        if producer.rd == 0:
            continue
        if current.rs == producer.rd:
            matches.append(_RawMatch("rs", current.rs, j, i - j))
        if current.rt == producer.rd:
            matches.append(_RawMatch("rt", current.rt, j, i - j))
    return matches


def _find_waw(decoded, i):
    current = decoded[i]
    for j in range(max(0, i - LOOKBACK), i):
        producer = decoded[j]
        if producer.rd != 0 and producer.rd == current.rd:
            return HazardRecord(HazardKind.WAW, f"Both instructions write to ${current.rd}",
                                forwardable=True, stall_cycles=0)
    return None


def analyze(decoded, forwarding_enabled: bool) -> HazardReport:
    """Classify the hazard of every instruction and derive stalls/forwarding.

    `decoded` is a sequence of DecodedInstruction. Deterministic and pure:
    the same input always yields an equal report.
    """
    n = len(decoded)
    hazards = [NO_HAZARD] * n
    forwardings = [()] * n
    stalls = [0] * n

    for i in range(1, n):
        current = decoded[i]
        if current.kind is InstructionKind.J:
            continue

        matches = _find_raw_matches(decoded, i)
        if matches:
            if forwarding_enabled:
                hazards[i] = HazardRecord(HazardKind.RAW,
                                          f"Depends on previous instruction {matches[0].from_index}",
                                          forwardable=True, stall_cycles=0)
                forwardings[i] = tuple(
                    ForwardingEdge(m.from_index, i, "EX" if m.distance == 1 else "MEM", "EX", f"${m.register}")
                    for m in matches)
            else:
                # ties keep the first match found
                worst = matches[0]
                for m in matches[1:]:
                    if STALL_BASE - m.distance > STALL_BASE - worst.distance:
                        worst = m
                needed = STALL_BASE - worst.distance
                hazards[i] = HazardRecord(HazardKind.RAW,
                                          f"{worst.source}(${worst.register}) depends on instruction {worst.from_index}",
                                          forwardable=False, stall_cycles=needed)
                stalls[i] = needed
        elif current.rd != 0:
            hazards[i] = _find_waw(decoded, i) or NO_HAZARD

    report = HazardReport(tuple(hazards), tuple(forwardings), tuple(stalls), forwarding_enabled)
    logger.debug("Analyzed %d instructions (forwarding=%s): %d stall cycles",
                 n, forwarding_enabled, report.total_stall_cycles)
    return report


def summarize(report: HazardReport) -> HazardSummary:
    return HazardSummary(
        hazard_count=sum(1 for h in report.hazards if h.kind is not HazardKind.NONE),
        stall_count=report.total_stall_cycles,
        forwarding_count=sum(1 for f in report.forwardings if f),
    )
