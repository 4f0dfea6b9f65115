"""
Simulation State
================
Mutable kinematic state (position, velocity) of every skill node.

Why is this file needed?
------------------------
1. Ownership: Exactly one SimulationState exists per loaded graph and only the
   scheduler's tick writes to it.
2. Reproducibility: Initial placement is drawn from an explicit seed, so two
   states built with the same arguments are bit-for-bit identical.
3. Isolation: The renderer never sees these arrays, only `RenderSnapshot`
   copies taken between ticks.

Classes:
    SimulationState: Position/velocity arrays aligned with GraphModel.nodes.
    RenderNode, RenderLink, RenderSnapshot: Read-only per-frame output.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from skillnetwork.config import DEFAULT_SEED, SEED_RADIUS, VIEWPORT_CENTER

if TYPE_CHECKING:
    import numpy.typing as npt

    from skillnetwork.model.graph import GraphModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderNode:
    id: str
    x: float
    y: float
    radius: float
    group: int


@dataclass(frozen=True)
class RenderLink:
    source_id: str
    target_id: str
    weight: float


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything the renderer needs to draw one frame."""
    nodes: tuple[RenderNode, ...] = ()
    links: tuple[RenderLink, ...] = ()
    tick: int = 0

    def node(self, node_id: str) -> RenderNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


def random_offset(seed: int, index: int, radius: float = SEED_RADIUS) -> npt.NDArray[np.float64]:
    """
    Uniform sample from a disk of `radius` for node `index`.

    The generator is keyed on (seed, index), so a node's offset does not
    depend on how many nodes precede it.
    """
    rng = np.random.default_rng([seed, index])
    angle = rng.uniform(0.0, 2.0 * np.pi)
    # sqrt keeps the density uniform over the disk area
    r = radius * np.sqrt(rng.uniform(0.0, 1.0))
    return np.array([r * np.cos(angle), r * np.sin(angle)], dtype=np.float64)


class SimulationState:
    """
    Positions and velocities of all nodes, row i belonging to `ids[i]`.
    """

    def __init__(
        self,
        ids: tuple[str, ...],
        positions: npt.NDArray[np.float64],
        velocities: npt.NDArray[np.float64] | None = None,
    ) -> None:
        n = len(ids)
        self.ids: tuple[str, ...] = tuple(ids)
        self.positions = np.array(positions, dtype=np.float64).reshape(n, 2)
        if velocities is None:
            self.velocities = np.zeros((n, 2), dtype=np.float64)
        else:
            self.velocities = np.array(velocities, dtype=np.float64).reshape(n, 2)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n={len(self.ids)})"

    def __len__(self) -> int:
        return len(self.ids)

    @classmethod
    def init(
        cls,
        model: GraphModel,
        viewport_center: tuple[float, float] = VIEWPORT_CENTER,
        seed: int = DEFAULT_SEED,
        seed_radius: float = SEED_RADIUS,
    ) -> SimulationState:
        """
        Seed every node inside a disk around the viewport center, at rest.

        Args:
            model: The graph whose nodes are placed.
            viewport_center: Center of the seeding disk.
            seed: Explicit random seed; the same seed gives the same layout.
            seed_radius: Radius of the seeding disk in logical units.
        """
        center = np.asarray(viewport_center, dtype=np.float64)
        positions = np.empty((len(model.nodes), 2), dtype=np.float64)
        for i in range(len(model.nodes)):
            positions[i] = center + random_offset(seed, i, seed_radius)

        logger.debug(f"Seeded {len(model.nodes)} nodes around {tuple(center)} (seed={seed}).")
        return cls(ids=model.node_ids, positions=positions)

    def copy(self) -> SimulationState:
        return SimulationState(self.ids, self.positions.copy(), self.velocities.copy())

    def kinetic_energy(self) -> float:
        """Total kinetic energy with unit mass: sum of |v_i|^2."""
        return float(np.sum(self.velocities * self.velocities))

    def snapshot(self, model: GraphModel, tick: int = 0) -> RenderSnapshot:
        """
        Copy the current positions into plain values for the renderer.
        """
        nodes = tuple(
            RenderNode(
                id=node.id,
                x=float(self.positions[i, 0]),
                y=float(self.positions[i, 1]),
                radius=node.radius,
                group=node.group,
            )
            for i, node in enumerate(model.nodes)
        )
        links = tuple(
            RenderLink(source_id=link.source_id, target_id=link.target_id, weight=link.weight)
            for link in model.links
        )
        return RenderSnapshot(nodes=nodes, links=links, tick=tick)
