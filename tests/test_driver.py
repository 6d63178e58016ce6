from pipeview.controller import SimulationController
from pipeview.driver import TickDriver, run_to_completion


def test_run_to_completion_collects_every_cycle(raw_pair):
    controller = SimulationController(forwarding_enabled=True)
    controller.start(raw_pair)
    states = run_to_completion(controller)
    assert [s.current_cycle for s in states] == [1, 2, 3, 4, 5, 6, 6]
    assert states[-1].finished


def test_driver_does_nothing_without_a_run():
    controller = SimulationController()
    ticks = []
    TickDriver(controller, interval=0, on_tick=ticks.append).run()
    assert ticks == []


def test_cancel_stops_the_driver(raw_pair):
    controller = SimulationController(forwarding_enabled=False)
    controller.start(raw_pair)
    ticks = []

    def on_tick(state):
        ticks.append(state)
        if len(ticks) == 2:
            driver.cancel()

    driver = TickDriver(controller, interval=0.001, on_tick=on_tick)
    state = driver.run()
    assert driver.cancelled
    assert len(ticks) == 2
    assert state.current_cycle == 3
    assert not state.finished


def test_driver_stops_when_paused(raw_pair):
    controller = SimulationController()
    controller.start(raw_pair)

    def on_tick(state):
        if state.current_cycle == 2:
            controller.pause()

    state = TickDriver(controller, interval=0, on_tick=on_tick).run()
    assert controller.state.current_cycle == 2
    assert controller.state.paused
    assert state.current_cycle == 2
