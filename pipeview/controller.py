import logging
import threading
from typing import Sequence

from . import pipeline
from .errors import EmptyProgramError
from .pipeline import PipelineState

logger = logging.getLogger(__name__)


class SimulationController:
    """Owns the current PipelineState and is the only thing that replaces it.

    Every lifecycle call and every tick runs under one lock, so ticks coming
    from a driver thread are serialized with pause/reset from anywhere else.
    The configured forwarding policy lives here and survives reset; the
    state only records the policy its run was analyzed with.
    """

    def __init__(self, forwarding_enabled: bool = True):
        self._lock = threading.Lock()
        self._forwarding_enabled = forwarding_enabled
        self._state = pipeline.reset(forwarding_enabled)

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def forwarding_enabled(self) -> bool:
        return self._forwarding_enabled

    def start(self, instructions: Sequence[int]) -> PipelineState:
        if not instructions:
            raise EmptyProgramError()
        with self._lock:
            self._state = pipeline.start(instructions, self._forwarding_enabled)
            return self._state

    def reset(self) -> PipelineState:
        with self._lock:
            self._state = pipeline.reset(self._forwarding_enabled)
            return self._state

    def restart(self) -> PipelineState:
        """Discard the run and start it again under the current forwarding policy."""
        with self._lock:
            instructions = self._state.instructions
            if instructions:
                self._state = pipeline.start(instructions, self._forwarding_enabled)
            return self._state

    def pause(self) -> PipelineState:
        with self._lock:
            self._state = pipeline.pause(self._state)
            return self._state

    def resume(self) -> PipelineState:
        with self._lock:
            self._state = pipeline.resume(self._state)
            return self._state

    def set_forwarding_policy(self, enabled: bool) -> None:
        # Hazards of a run in progress are not recomputed, use restart() for that.
        with self._lock:
            if enabled != self._forwarding_enabled:
                logger.debug("Forwarding policy set to %s", enabled)
            self._forwarding_enabled = enabled
            if not self._state.started:
                self._state = pipeline.reset(enabled)

    def tick(self) -> PipelineState:
        with self._lock:
            self._state = pipeline.advance(self._state)
            return self._state
