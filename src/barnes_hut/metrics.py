"""
Simulation diagnostics.

Provides quantitative measures for a snapshot:
- Kinetic, potential and total energy
- Total momentum and centre of mass
- Direct O(n^2) reference forces
- Barnes-Hut force error against the direct reference

Energy and momentum drift across snapshots is the usual way to judge whether
the time step and theta are small enough.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from .force import select_interaction_set
from .integrator import G, net_force
from .spatial.quadtree import QuadTree
from .types import Universe, Vector2


def _state_arrays(universe: Universe) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (masses, positions, velocities) as float64 arrays."""
    n = len(universe.bodies)
    masses = np.zeros(n, dtype=np.float64)
    positions = np.zeros((n, 2), dtype=np.float64)
    velocities = np.zeros((n, 2), dtype=np.float64)
    for i, body in enumerate(universe.bodies):
        masses[i] = body.mass
        positions[i] = (body.position.x, body.position.y)
        velocities[i] = (body.velocity.x, body.velocity.y)
    return masses, positions, velocities


def kinetic_energy(universe: Universe) -> float:
    """Sum of 0.5 * m * |v|^2 over all bodies."""
    masses, _, velocities = _state_arrays(universe)
    return float(0.5 * np.sum(masses * np.sum(velocities * velocities, axis=1)))


def potential_energy(universe: Universe, g: float = G) -> float:
    """
    Gravitational potential energy, summed over every unordered pair.

    Coincident pairs are skipped.
    """
    masses, positions, _ = _state_arrays(universe)
    n = len(masses)
    if n < 2:
        return 0.0

    i, j = np.triu_indices(n, k=1)
    dist = np.linalg.norm(positions[i] - positions[j], axis=1)
    mask = dist > 0
    return float(-g * np.sum(masses[i][mask] * masses[j][mask] / dist[mask]))


def total_energy(universe: Universe, g: float = G) -> float:
    """Kinetic plus potential energy."""
    return kinetic_energy(universe) + potential_energy(universe, g)


def total_momentum(universe: Universe) -> Vector2:
    """Sum of m * v over all bodies."""
    masses, _, velocities = _state_arrays(universe)
    px, py = np.sum(velocities * masses[:, None], axis=0)
    return Vector2(float(px), float(py))


def center_of_mass(universe: Universe) -> Vector2:
    """Mass-weighted centroid of all bodies."""
    masses, positions, _ = _state_arrays(universe)
    cx, cy = np.sum(positions * masses[:, None], axis=0) / np.sum(masses)
    return Vector2(float(cx), float(cy))


def direct_forces(universe: Universe, g: float = G) -> np.ndarray:
    """
    Exact net force on every body by pairwise summation.

    Returns:
        (n, 2) array of force vectors in snapshot order
    """
    masses, positions, _ = _state_arrays(universe)
    delta = positions[None, :, :] - positions[:, None, :]
    dist_sq = np.sum(delta * delta, axis=2)
    np.fill_diagonal(dist_sq, np.inf)
    dist_sq[dist_sq == 0] = np.inf
    inv_dist_cubed = dist_sq**-1.5
    scale = g * masses[:, None] * masses[None, :] * inv_dist_cubed
    return np.sum(delta * scale[:, :, None], axis=1)


def force_error(universe: Universe, theta: float, g: float = G) -> float:
    """
    Largest relative error of Barnes-Hut net forces against direct summation.

    Bodies with zero exact force are ignored.

    Args:
        universe: Snapshot to evaluate
        theta: Barnes-Hut threshold
        g: Gravitational constant

    Returns:
        max |F_bh - F_exact| / |F_exact| over all bodies
    """
    tree = QuadTree.from_universe(universe)
    exact = direct_forces(universe, g)
    worst = 0.0
    for i, body in enumerate(universe.bodies):
        approx = net_force(body, select_interaction_set(tree, body, theta), g)
        magnitude = float(np.hypot(exact[i, 0], exact[i, 1]))
        if magnitude == 0.0:
            continue
        err = float(np.hypot(approx.x - exact[i, 0], approx.y - exact[i, 1])) / magnitude
        worst = max(worst, err)
    return worst


def simulation_summary(
    universe: Universe,
    theta: Optional[float] = None,
    g: float = G,
) -> dict[str, Any]:
    """
    Compute a summary of snapshot diagnostics.

    Args:
        universe: Snapshot to evaluate
        theta: If given, also report the Barnes-Hut force error
        g: Gravitational constant

    Returns:
        Dictionary with:
        - bodies: Number of bodies
        - total_mass: Sum of masses
        - kinetic_energy, potential_energy, total_energy
        - momentum: (px, py)
        - center_of_mass: (x, y)
        - force_error: Only when theta is given
    """
    summary: dict[str, Any] = {
        "bodies": len(universe.bodies),
        "total_mass": float(sum(body.mass for body in universe.bodies)),
        "kinetic_energy": kinetic_energy(universe),
        "potential_energy": potential_energy(universe, g),
        "total_energy": total_energy(universe, g),
        "momentum": tuple(total_momentum(universe)),
        "center_of_mass": tuple(center_of_mass(universe)),
    }
    if theta is not None:
        summary["force_error"] = force_error(universe, theta, g)
    return summary


__all__ = [
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "total_momentum",
    "center_of_mass",
    "direct_forces",
    "force_error",
    "simulation_summary",
]
