"""
Newtonian gravity and the per-body kinematic update.

Each step assumes constant acceleration over the interval:

    a' = F / m
    v' = v + a' * dt
    p' = p + v * dt + 0.5 * a' * dt^2

The position update uses the velocity from the start of the step.
"""

from __future__ import annotations

import math
from typing import Iterable

from .types import Body, Vector2

# Gravitational constant (m^3 kg^-1 s^-2)
G = 6.67408e-11


def gravity_force(b1: Body, b2: Body, g: float = G) -> Vector2:
    """
    Gravitational force exerted on b1 by b2.

    Args:
        b1: Body the force acts on
        b2: Body exerting the force
        g: Gravitational constant

    Returns:
        Force vector pointing from b1 toward b2. Zero if the bodies coincide.
    """
    dx = b2.position.x - b1.position.x
    dy = b2.position.y - b1.position.y
    dist_sq = dx * dx + dy * dy
    if dist_sq == 0.0:
        return Vector2.zero()

    dist = math.sqrt(dist_sq)
    force = g * b1.mass * b2.mass / dist_sq
    return Vector2(force * dx / dist, force * dy / dist)


def net_force(target: Body, interaction_set: Iterable[Body], g: float = G) -> Vector2:
    """
    Sum the gravitational forces of an interaction set on target.

    The target itself is skipped by identity, so a distinct body that
    happens to share every field with the target still contributes.

    Args:
        target: Body the forces act on
        interaction_set: Real or aggregate bodies (see select_interaction_set)
        g: Gravitational constant

    Returns:
        Net force vector
    """
    fx, fy = 0.0, 0.0
    for source in interaction_set:
        if source is target:
            continue
        f = gravity_force(target, source, g)
        fx += f.x
        fy += f.y
    return Vector2(fx, fy)


def direct_net_force(target: Body, bodies: Iterable[Body], g: float = G) -> Vector2:
    """Exact O(n) net force on target from every other body (no tree)."""
    return net_force(target, bodies, g)


def integrate(target: Body, interaction_set: Iterable[Body], dt: float, g: float = G) -> Body:
    """
    Advance one body by one time step.

    The target is left untouched; acceleration, velocity and position are
    written together into a copy.

    Args:
        target: Body at the start of the step
        interaction_set: Bodies acting on target during the step
        dt: Time step in seconds
        g: Gravitational constant

    Returns:
        New body at the end of the step
    """
    force = net_force(target, interaction_set, g)
    acceleration = force / target.mass
    velocity = target.velocity + acceleration * dt
    p, v, a = target.position, target.velocity, acceleration
    position = Vector2(
        p.x + v.x * dt + 0.5 * a.x * dt * dt,
        p.y + v.y * dt + 0.5 * a.y * dt * dt,
    )

    updated = target.copy()
    updated.acceleration, updated.velocity, updated.position = acceleration, velocity, position
    return updated


__all__ = [
    "G",
    "gravity_force",
    "net_force",
    "direct_net_force",
    "integrate",
]
