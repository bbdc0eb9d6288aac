"""
Quadtree implementation for Barnes-Hut force approximation.

The quadtree recursively subdivides the universe square into quadrants.
Every node is exactly one of three variants:

- EmptyNode: no body
- LeafNode: exactly one real body
- InternalNode: an aggregate body (total mass and centre of mass of its
  subtree) plus four child slots

Aggregates are kept up to date while inserting, so the mass invariant holds
after every single insertion rather than after a final pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

from ..types import Body, Universe, Vector2

logger = logging.getLogger(__name__)

# Promotions nest one level per shared quadrant; only coincident bodies
# can push the tree this deep.
MAX_DEPTH = 64

NW, NE, SW, SE = 0, 1, 2, 3


class QuadTreeError(RuntimeError):
    """Base exception for quadtree construction failures."""

    def __init__(self, message: str, body_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.body_index = body_index


class DegenerateGeometryError(QuadTreeError):
    """Raised when a body cannot be placed into any quadrant."""

    pass


class TreeInvariantError(QuadTreeError):
    """Raised when a node is in a state construction can never produce."""

    pass


@dataclass(frozen=True)
class Quadrant:
    """
    An axis-aligned square region.

    Attributes:
        x, y: Lower-left corner
        width: Side length
    """

    x: float
    y: float
    width: float

    @property
    def center(self) -> Vector2:
        half = self.width / 2
        return Vector2(self.x + half, self.y + half)

    def contains(self, point: Vector2) -> bool:
        """Check if point lies within this square (boundary included)."""
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.width
        )

    def quadrant_index(self, point: Vector2) -> int:
        """
        Get child quadrant index for a point.

        A coordinate exactly on a centre line belongs to the lower side of
        that axis (west for x, south for y).

        Returns:
            0=NW, 1=NE, 2=SW, 3=SE

        Raises:
            DegenerateGeometryError: If the point has non-finite coordinates
        """
        if not point.is_finite():
            raise DegenerateGeometryError(f"Cannot classify non-finite point {point}")
        center = self.center
        east = point.x > center.x
        north = point.y > center.y
        return (0 if north else 2) + (1 if east else 0)

    @classmethod
    def covering(cls, width: float, points: Iterable[Vector2]) -> Quadrant:
        """
        Square covering both [0, width]^2 and every finite point.

        When every point lies inside the universe square this is simply
        Quadrant(0, 0, width). Non-finite points are ignored here and rejected
        on insertion.
        """
        x0 = y0 = 0.0
        x1 = y1 = float(width)
        for point in points:
            if not point.is_finite():
                continue
            x0 = min(x0, point.x)
            y0 = min(y0, point.y)
            x1 = max(x1, point.x)
            y1 = max(y1, point.y)
        return cls(x0, y0, max(x1 - x0, y1 - y0))

    def child(self, index: int) -> Quadrant:
        """Return the sub-square of half width for a child index."""
        half = self.width / 2
        x = self.x + half if index & 1 else self.x
        y = self.y if index & 2 else self.y + half
        return Quadrant(x, y, half)


@dataclass
class EmptyNode:
    """A node holding nothing."""

    quadrant: Quadrant


@dataclass
class LeafNode:
    """A node holding exactly one real body."""

    quadrant: Quadrant
    body: Body


@dataclass
class InternalNode:
    """
    A node summarizing a subtree.

    Attributes:
        quadrant: Region covered by this node
        aggregate: Synthetic body with the subtree's total mass positioned
            at its centre of mass
        children: Four child slots [NW, NE, SW, SE]
    """

    quadrant: Quadrant
    aggregate: Body
    children: List[QuadTreeNode]


QuadTreeNode = Union[EmptyNode, LeafNode, InternalNode]


def merge_aggregate(aggregate: Body, body: Body) -> None:
    """
    Fold a body into an aggregate in place.

    The new mass is m0 + m1 and the new position is the mass-weighted
    centroid (m0*p0 + m1*p1) / (m0 + m1).
    """
    m0, m1 = aggregate.mass, body.mass
    total = m0 + m1
    if total == 0:
        aggregate.position = body.position
    else:
        aggregate.position = (aggregate.position * m0 + body.position * m1) / total
    aggregate.mass = total


def _empty_aggregate() -> Body:
    return Body(mass=0.0)


class QuadTree:
    """
    Barnes-Hut quadtree over the bodies of one snapshot.

    The tree is built by a single writer and then only read. It is meant to
    be rebuilt from scratch every time step.

    Usage:
        tree = QuadTree.from_universe(universe)
        tree.total_mass, tree.center_of_mass

        interactions = select_interaction_set(tree, body, theta=0.5)
    """

    def __init__(self, quadrant: Quadrant) -> None:
        """
        Initialize an empty quadtree.

        Args:
            quadrant: Region covered by the root node
        """
        self.root: QuadTreeNode = EmptyNode(quadrant)
        self.body_count = 0

    @property
    def quadrant(self) -> Quadrant:
        return self.root.quadrant

    @property
    def total_mass(self) -> float:
        """Total mass of every body inserted so far."""
        if isinstance(self.root, LeafNode):
            return self.root.body.mass
        if isinstance(self.root, InternalNode):
            return self.root.aggregate.mass
        return 0.0

    @property
    def center_of_mass(self) -> Optional[Vector2]:
        """Mass-weighted centroid of every body, or None if the tree is empty."""
        if isinstance(self.root, LeafNode):
            return self.root.body.position
        if isinstance(self.root, InternalNode):
            return self.root.aggregate.position
        return None

    def insert(self, body: Body, index: Optional[int] = None) -> None:
        """
        Insert a body into the quadtree.

        Args:
            body: Real body to insert
            index: Position of the body in its snapshot, used in diagnostics

        Raises:
            DegenerateGeometryError: If the body has a non-finite position or
                coincides with a body already in the tree
            TreeInvariantError: If a malformed node is encountered
        """
        if not body.position.is_finite():
            raise DegenerateGeometryError(
                f"Body {index}: non-finite position {body.position}", body_index=index
            )
        self.root = self._insert_into(self.root, body, 0, index)
        self.body_count += 1

    def _insert_into(
        self,
        node: QuadTreeNode,
        body: Body,
        depth: int,
        index: Optional[int],
    ) -> QuadTreeNode:
        """Recursively insert body below node and return the node now in its slot."""
        if isinstance(node, EmptyNode):
            return LeafNode(node.quadrant, body)

        if isinstance(node, InternalNode):
            if len(node.children) != 4:
                raise TreeInvariantError(
                    f"Internal node has {len(node.children)} children, expected 4",
                    body_index=index,
                )
            merge_aggregate(node.aggregate, body)
            quadrant = node.quadrant.quadrant_index(body.position)
            node.children[quadrant] = self._insert_into(
                node.children[quadrant], body, depth + 1, index
            )
            return node

        if isinstance(node, LeafNode):
            if depth >= MAX_DEPTH:
                raise DegenerateGeometryError(
                    f"Body {index} at {body.position} cannot be separated from "
                    f"{node.body.position} after {MAX_DEPTH} subdivisions",
                    body_index=index,
                )
            # Promote: the leaf's body and the new body both go through the
            # internal branch, which rebuilds the aggregate from zero.
            internal = InternalNode(
                node.quadrant,
                _empty_aggregate(),
                [EmptyNode(node.quadrant.child(i)) for i in range(4)],
            )
            self._insert_into(internal, node.body, depth, None)
            self._insert_into(internal, body, depth, index)
            return internal

        raise TreeInvariantError(f"Unknown node type {type(node).__name__}", body_index=index)

    def walk(self) -> Iterator[QuadTreeNode]:
        """Yield every node in pre-order."""
        stack: List[QuadTreeNode] = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, InternalNode):
                stack.extend(reversed(node.children))

    def depth(self) -> int:
        """Number of levels below the root (0 for an empty or single-leaf tree)."""
        return self._depth(self.root)

    def _depth(self, node: QuadTreeNode) -> int:
        if not isinstance(node, InternalNode):
            return 0
        return 1 + max(self._depth(child) for child in node.children)

    @classmethod
    def from_universe(cls, universe: Universe) -> QuadTree:
        """
        Build a quadtree from a snapshot.

        The root covers the universe square anchored at the origin, grown
        towards negative and positive coordinates as needed so that bodies
        which drifted outside the universe still land inside it. Bodies are
        inserted in snapshot order.

        Args:
            universe: Snapshot to index

        Returns:
            QuadTree with every body inserted
        """
        positions = (body.position for body in universe.bodies)
        tree = cls(Quadrant.covering(universe.width, positions))
        for i, body in enumerate(universe.bodies):
            tree.insert(body, index=i)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built quadtree: %d bodies, depth %d, total mass %.6e",
                tree.body_count,
                tree.depth(),
                tree.total_mass,
            )
        return tree


__all__ = [
    "MAX_DEPTH",
    "NW",
    "NE",
    "SW",
    "SE",
    "QuadTreeError",
    "DegenerateGeometryError",
    "TreeInvariantError",
    "Quadrant",
    "EmptyNode",
    "LeafNode",
    "InternalNode",
    "QuadTreeNode",
    "merge_aggregate",
    "QuadTree",
]
