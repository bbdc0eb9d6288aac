"""
Theta-criterion traversal of the quadtree.

For a target body, the traversal selects the bodies to sum forces over:
real bodies from nearby leaves, and aggregate bodies standing in for
clusters that are far enough away.

The theta parameter controls the accuracy/speed tradeoff:
- theta = 0: Exact (always recurse down to leaves)
- theta = 0.5: Good balance (recommended)
- theta = 1.0+: Fast but less accurate
"""

from __future__ import annotations

from typing import List

from .spatial.quadtree import (
    EmptyNode,
    InternalNode,
    LeafNode,
    QuadTree,
    QuadTreeNode,
    TreeInvariantError,
)
from .types import Body
from .validation import validate_theta


def select_interaction_set(tree: QuadTree, target: Body, theta: float) -> List[Body]:
    """
    Select the bodies that act on target.

    Traversal starts from the root's children; the root aggregate itself is
    never a candidate. Leaf bodies are always included, even when they are
    the target; excluding the target is left to net_force().

    Args:
        tree: Fully built quadtree
        target: Body to collect interactions for
        theta: Barnes-Hut threshold (0 = exact, higher = more approximation)

    Returns:
        Real and aggregate bodies in traversal order

    Raises:
        InvalidParameterError: If theta is negative or not finite
    """
    theta = validate_theta(theta)
    root = tree.root

    if isinstance(root, EmptyNode):
        return []
    if isinstance(root, LeafNode):
        return [root.body]

    selected: List[Body] = []
    _collect_children(root, target, theta, selected)
    return selected


def _collect_children(
    node: InternalNode,
    target: Body,
    theta: float,
    selected: List[Body],
) -> None:
    """Append the contributions of every child of node to selected."""
    for child in node.children:
        _collect(child, target, theta, selected)


def _collect(
    node: QuadTreeNode,
    target: Body,
    theta: float,
    selected: List[Body],
) -> None:
    if isinstance(node, EmptyNode):
        return

    if isinstance(node, LeafNode):
        selected.append(node.body)
        return

    if isinstance(node, InternalNode):
        dist = target.position.distance_to(node.aggregate.position)
        # Target sits on the centroid: the ratio is undefined, so open the node.
        if dist == 0.0 or node.quadrant.width / dist > theta:
            _collect_children(node, target, theta, selected)
        else:
            selected.append(node.aggregate)
        return

    raise TreeInvariantError(f"Unknown node type {type(node).__name__}")


__all__ = ["select_interaction_set"]
