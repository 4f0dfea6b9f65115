"""
Force Computation
=================
Net force on every node for one tick of the skill-network layout.

Three contributions are summed per node:
    1. Repulsion between every pair of nodes, k_r / max(d, d_min)^2.
    2. A spring along every link, (d - L0) * k_s, towards the rest length.
    3. A centering pull, (center - position) * k_c.

Link weight is not part of the physics; it is only a stroke-width hint for
the renderer.

The pairwise repulsion is O(n^2) per tick (plus O(m) for links). That is the
scalability limit of this layout and is fine for the tens of nodes an
analysis produces.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from skillnetwork.config import ForceParameters, VIEWPORT_CENTER

if TYPE_CHECKING:
    import numpy.typing as npt

    from skillnetwork.model.graph import GraphModel
    from skillnetwork.model.state import SimulationState

DEFAULT_PARAMETERS = ForceParameters()


def repulsion_magnitude(
    distance: float | npt.NDArray[np.float64],
    params: ForceParameters = DEFAULT_PARAMETERS,
) -> float | npt.NDArray[np.float64]:
    """Inverse-square repulsion with the distance floored to `params.min_distance`."""
    floored = np.maximum(distance, params.min_distance)
    return params.repulsion / (floored * floored)


def spring_magnitude(
    distance: float | npt.NDArray[np.float64],
    params: ForceParameters = DEFAULT_PARAMETERS,
) -> float | npt.NDArray[np.float64]:
    """Positive pulls the endpoints together, negative pushes them apart."""
    return (distance - params.rest_length) * params.spring_strength


def _unit_vectors(
    delta: npt.NDArray[np.float64],
    dist: npt.NDArray[np.float64],
    fallback: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """delta / dist, with `fallback` where the two points coincide."""
    safe = np.where(dist > 0.0, dist, 1.0)
    unit = delta / safe[..., None]
    coincident = dist == 0.0
    unit[coincident] = fallback[coincident]
    return unit


def repulsion_forces(
    positions: npt.NDArray[np.float64],
    params: ForceParameters = DEFAULT_PARAMETERS,
) -> npt.NDArray[np.float64]:
    n = positions.shape[0]
    if n < 2:
        return np.zeros((n, 2), dtype=np.float64)

    # delta[i, j] points from j to i
    delta = positions[:, None, :] - positions[None, :, :]
    dist = np.sqrt(np.einsum("ijk,ijk->ij", delta, delta))

    # Coincident pair: lower index goes +x, higher index -x
    upper = np.triu(np.ones((n, n), dtype=bool), k=1)
    fallback = np.zeros((n, n, 2), dtype=np.float64)
    fallback[..., 0] = np.where(upper, 1.0, -1.0)

    unit = _unit_vectors(delta, dist, fallback)
    magnitude = repulsion_magnitude(dist, params)
    np.fill_diagonal(magnitude, 0.0)

    return np.einsum("ij,ijk->ik", magnitude, unit)


def spring_forces(
    positions: npt.NDArray[np.float64],
    endpoints: npt.NDArray[np.int64],
    params: ForceParameters = DEFAULT_PARAMETERS,
) -> npt.NDArray[np.float64]:
    forces = np.zeros_like(positions)
    if endpoints.size == 0:
        return forces

    source, target = endpoints[:, 0], endpoints[:, 1]
    delta = positions[target] - positions[source]
    dist = np.sqrt(np.einsum("ij,ij->i", delta, delta))

    fallback = np.zeros_like(delta)
    fallback[:, 0] = 1.0
    unit = _unit_vectors(delta, dist, fallback)
    pull = unit * spring_magnitude(dist, params)[:, None]

    # add.at: several links may share an endpoint
    np.add.at(forces, source, pull)
    np.add.at(forces, target, -pull)
    return forces


def centering_forces(
    positions: npt.NDArray[np.float64],
    center: tuple[float, float] = VIEWPORT_CENTER,
    params: ForceParameters = DEFAULT_PARAMETERS,
) -> npt.NDArray[np.float64]:
    return (np.asarray(center, dtype=np.float64) - positions) * params.center_strength


def compute_forces(
    state: SimulationState,
    model: GraphModel,
    params: ForceParameters = DEFAULT_PARAMETERS,
    center: tuple[float, float] = VIEWPORT_CENTER,
    endpoints: Optional[npt.NDArray[np.int64]] = None,
) -> npt.NDArray[np.float64]:
    """
    Net force per node for the current state. Does not modify `state`.

    Args:
        state: Current positions (velocities are not read).
        model: Graph providing the links.
        params: Force constants.
        center: Point the centering force pulls towards.
        endpoints: Pre-resolved link indices, see `GraphModel.link_endpoints`.

    Returns:
        Array of shape (n, 2), row i being the force on `state.ids[i]`.
    """
    positions = state.positions
    if positions.shape[0] == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if endpoints is None:
        endpoints = model.link_endpoints()

    forces = repulsion_forces(positions, params)
    forces += spring_forces(positions, endpoints, params)
    forces += centering_forces(positions, center, params)
    return forces
