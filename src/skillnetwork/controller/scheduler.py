"""
Simulation Scheduler
====================
Drives one simulation tick per display refresh while the skill view is open.

Why is this file needed?
------------------------
1. Ownership: The scheduler is the only writer of the SimulationState. The
   renderer receives copies through `snapshot()` / the `on_frame` listener.
2. Lifecycle: It owns the Idle -> Initializing -> Running -> Stopped state
   machine. `stop()` cancels the frame source and no tick fires afterwards.
3. Decoupling: Frames come from an injected `FrameSource` (a QTimer in the
   application, a fake in tests), so nothing here imports Qt.

Classes:
    SchedulerState: Lifecycle states.
    FrameSource: Protocol of a periodic callback mechanism.
    SimulationScheduler: The loop itself.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol, TYPE_CHECKING

from skillnetwork.config import DEFAULT_SEED, ForceParameters, VIEWPORT_CENTER
from skillnetwork.controller.forces import DEFAULT_PARAMETERS
from skillnetwork.controller.integrator import tick
from skillnetwork.model.state import RenderSnapshot, SimulationState

if TYPE_CHECKING:
    from skillnetwork.model.graph import GraphModel

logger = logging.getLogger(__name__)


class SchedulerError(RuntimeError):
    """Illegal use of the scheduler lifecycle."""


class SchedulerState(Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPED = "stopped"


class FrameSource(Protocol):
    """Calls `callback` once per display refresh until stopped."""

    @property
    def is_active(self) -> bool: ...

    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class SimulationScheduler:
    """
    Runs the layout loop for one GraphModel at a time.

    A new model passed to `load` replaces the old one wholesale: the previous
    SimulationState is discarded and a freshly seeded one takes its place.
    """

    def __init__(
        self,
        frame_source: FrameSource,
        params: ForceParameters = DEFAULT_PARAMETERS,
        center: tuple[float, float] = VIEWPORT_CENTER,
        seed: int = DEFAULT_SEED,
        on_frame: Optional[Callable[[RenderSnapshot], None]] = None,
    ) -> None:
        self._frames = frame_source
        self.params = params
        self.center = center
        self.seed = seed
        self.on_frame = on_frame

        self._state = SchedulerState.IDLE
        self._model: Optional[GraphModel] = None
        self._simulation: Optional[SimulationState] = None
        self._endpoints = None
        self._tick_count: int = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(state={self._state.value}, ticks={self._tick_count})"

    # ------------------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def model(self) -> Optional[GraphModel]:
        return self._model

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def snapshot(self) -> RenderSnapshot:
        """Plain copy of the current layout; empty before the first load."""
        if self._model is None or self._simulation is None:
            return RenderSnapshot()
        return self._simulation.snapshot(self._model, self._tick_count)

    def kinetic_energy(self) -> float:
        return 0.0 if self._simulation is None else self._simulation.kinetic_energy()

    # ------------------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------------------

    def _set_state(self, new_state: SchedulerState) -> None:
        if new_state is not self._state:
            logger.debug(f"Scheduler {self._state.value} -> {new_state.value}")
            self._state = new_state

    def load(self, model: GraphModel, start: bool = True) -> None:
        """
        Discard any running simulation, seed a new one for `model` and,
        unless `start` is False, begin ticking.
        """
        if self._state in (SchedulerState.RUNNING, SchedulerState.INITIALIZING):
            self.stop()

        self._model = model
        self._simulation = SimulationState.init(model, self.center, self.seed)
        self._endpoints = model.link_endpoints()
        self._tick_count = 0
        self._set_state(SchedulerState.INITIALIZING)
        logger.info(f"Loaded skill graph with {len(model.nodes)} nodes and {len(model.links)} links.")

        if start:
            self.start()

    def start(self) -> None:
        if self._state is SchedulerState.RUNNING:
            return
        if self._state is not SchedulerState.INITIALIZING:
            raise SchedulerError(
                f"Cannot start from state '{self._state.value}'; load a graph first."
            )
        self._set_state(SchedulerState.RUNNING)
        self._frames.start(self._on_frame)

    def stop(self) -> None:
        """
        Cancel the frame source. Safe to call repeatedly; once this returns no
        further tick runs until a new graph is loaded.
        """
        if self._state in (SchedulerState.IDLE, SchedulerState.STOPPED):
            return
        # State first: a callback already queued by the frame source sees STOPPED
        self._set_state(SchedulerState.STOPPED)
        self._frames.stop()
        logger.info(f"Simulation stopped after {self._tick_count} ticks.")

    # ------------------------------------------------------------------------------
    # Frame callback
    # ------------------------------------------------------------------------------

    def _on_frame(self) -> None:
        if self._state is not SchedulerState.RUNNING:
            return
        try:
            tick(self._simulation, self._model, self.params, self.center, self._endpoints)
        except Exception as e:
            logger.error(f"Simulation tick failed, stopping: {e}")
            self.stop()
            raise
        self._tick_count += 1

        if self.on_frame is not None:
            self.on_frame(self.snapshot())
