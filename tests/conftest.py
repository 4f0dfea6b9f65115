import logging

import pytest

from skillnetwork.model.graph import GraphModel


class FakeFrameSource:
    """Frame source driven by hand: each `fire()` is one display refresh."""

    def __init__(self):
        self.callback = None
        self.started = 0
        self.stopped = 0

    @property
    def is_active(self):
        return self.callback is not None

    def start(self, callback):
        self.callback = callback
        self.started += 1

    def stop(self):
        self.callback = None
        self.stopped += 1

    def fire(self, times=1):
        for _ in range(times):
            if self.callback is not None:
                self.callback()


@pytest.fixture
def frame_source():
    return FakeFrameSource()


@pytest.fixture
def skill_graph():
    nodes = [
        {"id": "Python", "group": 1, "radius": 9},
        {"id": "SQL", "group": 1, "radius": 6},
        {"id": "Docker", "group": 3, "radius": 5},
        {"id": "Communication", "group": 2, "radius": 7},
        {"id": "Leadership", "group": 2, "radius": 4},
    ]
    links = [
        {"source": "Python", "target": "SQL", "value": 4},
        {"source": "Python", "target": "Docker", "value": 2},
        {"source": "Communication", "target": "Leadership", "value": 5},
        {"source": "SQL", "target": "Communication", "value": 1},
    ]
    return GraphModel.build(nodes, links)


@pytest.fixture(autouse=True)
def quiet_package_logger():
    logging.getLogger("skillnetwork").setLevel(logging.WARNING)
    yield


@pytest.fixture
def make_frame_source():
    return FakeFrameSource
