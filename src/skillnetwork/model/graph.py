"""
Skill Graph (Data Model)
========================
Validated, immutable snapshot of the skill nodes and their weighted links.

Why is this file needed?
------------------------
1. Validation: The Analysis Service returns loosely typed JSON. Everything the
   simulation relies on (unique ids, resolvable link endpoints, positive
   radius/weight) is enforced here, once, at construction time.
2. Immutability: A GraphModel never changes after it is built. When a new
   analysis arrives, a new GraphModel replaces the old one wholesale.

Classes:
    SkillNode: One skill (id, category tag, importance).
    SkillLink: A weighted relationship between two node ids.
    GraphModel: The container, built through `GraphModel.build`.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

import numpy as np

from skillnetwork.config import EPSILON

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class GraphValidationError(ValueError):
    """Raised when the node list is structurally malformed."""


@dataclass(frozen=True)
class SkillNode:
    id: str
    group: int = 0
    radius: float = EPSILON


@dataclass(frozen=True)
class SkillLink:
    source_id: str
    target_id: str
    weight: float = EPSILON


def _positive(value: Any) -> float:
    """Coerce to a finite float > 0, clamping anything else to EPSILON."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return EPSILON
    if not math.isfinite(number) or number <= 0.0:
        return EPSILON
    return max(number, EPSILON)


def _group(value: Any) -> int:
    """Groups are opaque integer tags; anything unreadable becomes 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _is_list_like(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


@dataclass(frozen=True)
class GraphModel:
    """
    Immutable skill graph.

    `dropped_links` and `overwritten_nodes` record what the build had to
    discard, so the view can report it without re-validating.
    """
    nodes: tuple[SkillNode, ...] = ()
    links: tuple[SkillLink, ...] = ()
    dropped_links: int = 0
    overwritten_nodes: int = 0

    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = {node.id: i for i, node in enumerate(self.nodes)}
        if len(index) != len(self.nodes):
            raise GraphValidationError("Node ids must be unique within a graph.")
        object.__setattr__(self, "_index", index)

    # ------------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------------

    @classmethod
    def build(cls, raw_nodes: Any, raw_links: Any = None) -> GraphModel:
        """
        Build a GraphModel from Analysis Service nodes and links.

        Args:
            raw_nodes: Sequence of mappings `{id: str, group: number, radius: number}`.
            raw_links: Sequence of mappings `{source: str, target: str, value: number}`.

        Returns:
            The validated graph. Dangling or malformed links are dropped.

        Raises:
            GraphValidationError: If `raw_nodes` is not a sequence of mappings with
                string ids.
        """
        if not _is_list_like(raw_nodes):
            raise GraphValidationError(
                f"Expected a list of nodes, got {type(raw_nodes).__name__}."
            )

        # Duplicate ids: the last entry wins, in the slot of the first one
        by_id: dict[str, SkillNode] = {}
        overwritten = 0
        for position, raw in enumerate(raw_nodes):
            if not isinstance(raw, Mapping):
                raise GraphValidationError(
                    f"Node #{position} is a {type(raw).__name__}, expected an object."
                )
            node_id = raw.get("id")
            if not isinstance(node_id, str) or not node_id:
                raise GraphValidationError(f"Node #{position} has no string id.")
            if node_id in by_id:
                overwritten += 1
                logger.debug(f"Duplicate node id '{node_id}', keeping the later entry.")
            by_id[node_id] = SkillNode(
                id=node_id,
                group=_group(raw.get("group")),
                radius=_positive(raw.get("radius")),
            )

        links, dropped = cls._filter_links(raw_links, by_id.keys())

        model = cls(
            nodes=tuple(by_id.values()),
            links=tuple(links),
            dropped_links=dropped,
            overwritten_nodes=overwritten,
        )
        logger.info(
            f"Built skill graph: {len(model.nodes)} nodes, {len(model.links)} links "
            f"({dropped} dropped, {overwritten} duplicate ids overwritten)."
        )
        return model

    @classmethod
    def from_response(cls, data: Any) -> GraphModel:
        """Build from a whole response object `{nodes: [...], links: [...]}`."""
        if not isinstance(data, Mapping):
            raise GraphValidationError(
                f"Expected a network object, got {type(data).__name__}."
            )
        return cls.build(data.get("nodes"), data.get("links"))

    @staticmethod
    def _filter_links(raw_links: Any, known_ids) -> tuple[list[SkillLink], int]:
        if raw_links is None:
            return [], 0
        if not _is_list_like(raw_links):
            logger.warning(f"Ignoring links of type {type(raw_links).__name__}, expected a list.")
            return [], 0

        known = set(known_ids)
        links: list[SkillLink] = []
        dropped = 0
        for raw in raw_links:
            if not isinstance(raw, Mapping):
                dropped += 1
                logger.debug(f"Dropping malformed link {raw!r}.")
                continue
            source, target = raw.get("source"), raw.get("target")
            if not isinstance(source, str) or not isinstance(target, str) \
                    or source not in known or target not in known:
                dropped += 1
                logger.debug(f"Dropping link {source!r} -> {target!r}: unknown endpoint.")
                continue
            links.append(SkillLink(source_id=source, target_id=target, weight=_positive(raw.get("value"))))
        return links, dropped

    # ------------------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def node_ids(self) -> tuple[str, ...]:
        return tuple(node.id for node in self.nodes)

    def index_of(self, node_id: str) -> Optional[int]:
        return self._index.get(node_id)

    def link_endpoints(self) -> npt.NDArray[np.int64]:
        """
        Resolve every link to `(source_index, target_index)` by id.

        Returns:
            Integer array of shape (m, 2).
        """
        pairs = np.empty((len(self.links), 2), dtype=np.int64)
        for k, link in enumerate(self.links):
            pairs[k, 0] = self._index[link.source_id]
            pairs[k, 1] = self._index[link.target_id]
        return pairs
