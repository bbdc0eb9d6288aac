"""
Spatial data structures for Barnes-Hut force approximation.

Provides the quadtree that summarizes mass distribution hierarchically.
"""

from .quadtree import (
    DegenerateGeometryError,
    EmptyNode,
    InternalNode,
    LeafNode,
    Quadrant,
    QuadTree,
    QuadTreeError,
    QuadTreeNode,
    TreeInvariantError,
    merge_aggregate,
)

__all__ = [
    "DegenerateGeometryError",
    "EmptyNode",
    "InternalNode",
    "LeafNode",
    "Quadrant",
    "QuadTree",
    "QuadTreeError",
    "QuadTreeNode",
    "TreeInvariantError",
    "merge_aggregate",
]
