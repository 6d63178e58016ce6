import logging
import threading

logger = logging.getLogger(__name__)


class TickDriver:
    """Calls controller.tick() once per `interval` seconds until the run stops.

    The simulation itself never sleeps; this is the only place that knows
    about wall-clock time. cancel() may be called from another thread.
    """

    def __init__(self, controller, interval=1.0, on_tick=None):
        self.controller = controller
        self.interval = interval
        self.on_tick = on_tick
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self):
        state = self.controller.state
        while state.running and not state.finished and not self._cancelled.is_set():
            if self.interval and self._cancelled.wait(self.interval):
                break
            state = self.controller.tick()
            if self.on_tick:
                self.on_tick(state)
                state = self.controller.state
        if self._cancelled.is_set():
            logger.debug("Driver cancelled at cycle %d", state.current_cycle)
        return state


def run_to_completion(controller):
    """Tick without delay until the run stops; return every state seen."""
    states = [controller.state]
    TickDriver(controller, interval=0, on_tick=states.append).run()
    return states
