"""
Integrator
==========
Advances a SimulationState by one damped explicit-Euler step.

Unit mass and unit timestep are assumed, so a tick is simply:
    velocity += force
    velocity *= damping
    position += velocity

No energy conservation is attempted; damping < 1 bleeds kinetic energy every
tick, which is what makes the layout settle.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np

from skillnetwork.config import ForceParameters, VIEWPORT_CENTER
from skillnetwork.controller.forces import DEFAULT_PARAMETERS, compute_forces

if TYPE_CHECKING:
    import numpy.typing as npt

    from skillnetwork.model.graph import GraphModel
    from skillnetwork.model.state import SimulationState

logger = logging.getLogger(__name__)


def reset_non_finite(
    state: SimulationState,
    center: tuple[float, float] = VIEWPORT_CENTER,
) -> int:
    """
    Put every node with a NaN/inf position or velocity back at `center`, at rest.

    Returns:
        Number of nodes that were reset.
    """
    if len(state) == 0:
        return 0
    finite = np.isfinite(state.positions).all(axis=1) & np.isfinite(state.velocities).all(axis=1)
    bad = ~finite
    count = int(bad.sum())
    if count:
        state.positions[bad] = np.asarray(center, dtype=np.float64)
        state.velocities[bad] = 0.0
        reset_ids = [state.ids[i] for i in np.flatnonzero(bad)]
        logger.warning(f"Reset {count} node(s) with non-finite state: {reset_ids}")
    return count


def integrate(
    state: SimulationState,
    forces: npt.NDArray[np.float64],
    params: ForceParameters = DEFAULT_PARAMETERS,
    center: tuple[float, float] = VIEWPORT_CENTER,
) -> int:
    """
    Apply `forces` to `state` in place.

    Returns:
        Number of nodes reset by the non-finite guard after the step.
    """
    state.velocities += forces
    state.velocities *= params.damping
    state.positions += state.velocities
    return reset_non_finite(state, center)


def tick(
    state: SimulationState,
    model: GraphModel,
    params: ForceParameters = DEFAULT_PARAMETERS,
    center: tuple[float, float] = VIEWPORT_CENTER,
    endpoints: Optional[npt.NDArray[np.int64]] = None,
) -> SimulationState:
    """
    One simulation tick in place: all forces are computed from the current
    positions before any position moves.
    """
    # Values injected from outside between ticks must not poison the pair sums
    reset_non_finite(state, center)
    forces = compute_forces(state, model, params, center, endpoints)
    integrate(state, forces, params, center)
    return state


def step(
    state: SimulationState,
    model: GraphModel,
    params: ForceParameters = DEFAULT_PARAMETERS,
    center: tuple[float, float] = VIEWPORT_CENTER,
) -> SimulationState:
    """Like `tick`, but leaves `state` untouched and returns the next state."""
    return tick(state.copy(), model, params, center)
