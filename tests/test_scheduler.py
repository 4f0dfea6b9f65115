import numpy as np
import pytest

from skillnetwork.controller import scheduler as scheduler_module
from skillnetwork.controller.scheduler import SchedulerError, SchedulerState, SimulationScheduler
from skillnetwork.model.graph import GraphModel


@pytest.fixture
def tick_spy(monkeypatch):
    calls = []
    real_tick = scheduler_module.tick

    def counting_tick(*args, **kwargs):
        calls.append(1)
        return real_tick(*args, **kwargs)

    monkeypatch.setattr(scheduler_module, "tick", counting_tick)
    return calls


def test_starts_idle(frame_source):
    scheduler = SimulationScheduler(frame_source)

    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.snapshot().nodes == ()
    assert scheduler.kinetic_energy() == 0.0
    with pytest.raises(SchedulerError):
        scheduler.start()


def test_load_runs_one_tick_per_frame(frame_source, skill_graph, tick_spy):
    frames = []
    scheduler = SimulationScheduler(frame_source, on_frame=frames.append)

    scheduler.load(skill_graph)
    assert scheduler.state is SchedulerState.RUNNING
    assert frame_source.is_active

    frame_source.fire(3)

    assert scheduler.tick_count == 3
    assert len(tick_spy) == 3
    assert [f.tick for f in frames] == [1, 2, 3]
    assert len(frames[-1].nodes) == 5


def test_stop_cancels_loop(frame_source, skill_graph, tick_spy):
    scheduler = SimulationScheduler(frame_source)
    scheduler.load(skill_graph)
    pending = frame_source.callback

    scheduler.stop()
    frame_source.fire(10)
    # A refresh callback that was already queued must be a no-op too
    pending()

    assert scheduler.state is SchedulerState.STOPPED
    assert not frame_source.is_active
    assert tick_spy == []
    assert scheduler.tick_count == 0


def test_stop_after_running_freezes_layout(frame_source, skill_graph):
    scheduler = SimulationScheduler(frame_source)
    scheduler.load(skill_graph)
    frame_source.fire(20)
    scheduler.stop()

    frozen = scheduler.snapshot()
    frame_source.fire(20)

    assert scheduler.tick_count == 20
    assert scheduler.snapshot() == frozen


def test_stop_is_idempotent(frame_source, skill_graph):
    scheduler = SimulationScheduler(frame_source)
    scheduler.stop()
    scheduler.load(skill_graph)
    scheduler.stop()
    scheduler.stop()

    assert frame_source.stopped == 1
    with pytest.raises(SchedulerError):
        scheduler.start()


def test_new_model_replaces_old_wholesale(frame_source, skill_graph):
    scheduler = SimulationScheduler(frame_source, seed=3)
    scheduler.load(skill_graph)
    frame_source.fire(10)

    replacement = GraphModel.build([{"id": "Go"}, {"id": "Kubernetes"}],
                                   [{"source": "Go", "target": "Kubernetes", "value": 2}])
    scheduler.load(replacement)

    assert scheduler.state is SchedulerState.RUNNING
    assert scheduler.tick_count == 0
    assert scheduler.model is replacement
    assert [n.id for n in scheduler.snapshot().nodes] == ["Go", "Kubernetes"]
    assert frame_source.started == 2
    assert frame_source.stopped == 1

    frame_source.fire()
    assert scheduler.tick_count == 1


def test_reload_after_stop(frame_source, skill_graph):
    scheduler = SimulationScheduler(frame_source)
    scheduler.load(skill_graph)
    scheduler.stop()

    scheduler.load(skill_graph)
    frame_source.fire(2)
    assert scheduler.tick_count == 2


def test_empty_graph_runs_and_renders_nothing(frame_source):
    scheduler = SimulationScheduler(frame_source)
    scheduler.load(GraphModel.build([], []))
    frame_source.fire(5)

    assert scheduler.state is SchedulerState.RUNNING
    assert scheduler.tick_count == 5
    assert scheduler.snapshot().nodes == ()


def test_load_without_start(frame_source, skill_graph):
    scheduler = SimulationScheduler(frame_source)
    scheduler.load(skill_graph, start=False)

    assert scheduler.state is SchedulerState.INITIALIZING
    assert not frame_source.is_active

    scheduler.start()
    scheduler.start()
    assert scheduler.state is SchedulerState.RUNNING
    assert frame_source.started == 1


def test_seeded_scheduler_is_reproducible(skill_graph, make_frame_source):
    layouts = []
    for _ in range(2):
        source = make_frame_source()
        scheduler = SimulationScheduler(source, seed=17)
        scheduler.load(skill_graph)
        source.fire(30)
        layouts.append([(n.x, n.y) for n in scheduler.snapshot().nodes])

    assert np.array_equal(layouts[0], layouts[1])


def test_failing_tick_stops_loop(frame_source, skill_graph, monkeypatch):
    def broken_tick(*args, **kwargs):
        raise FloatingPointError("boom")

    scheduler = SimulationScheduler(frame_source)
    scheduler.load(skill_graph)
    monkeypatch.setattr(scheduler_module, "tick", broken_tick)

    with pytest.raises(FloatingPointError):
        frame_source.fire()

    assert scheduler.state is SchedulerState.STOPPED
    assert not frame_source.is_active
