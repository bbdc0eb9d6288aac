"""
Common types for the Barnes-Hut simulation core.

This module provides the fundamental types shared by every component:
- Vector2: Immutable 2D vector (positions, velocities, accelerations, forces)
- Body: Mutable physical state of one point mass
- Universe: Immutable snapshot of all bodies at one simulated instant
- EventType: Simulation lifecycle events
- Event: Event payload for callbacks
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator, Optional, Tuple, TypedDict


class EventType(IntEnum):
    """
    Simulation lifecycle events.

    - start: Simulation steps have begun
    - tick: Fired once per completed time step
    - end: Requested number of steps has been reached
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    step: int
    time: float
    universe: Optional["Universe"]


@dataclass(frozen=True)
class Vector2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> Vector2:
        return cls(0.0, 0.0)

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def dot(self, other: Vector2) -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def norm(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        """True if both components are finite (no NaN or infinity)."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    def __repr__(self) -> str:
        return f"Vector2({self.x:.6g}, {self.y:.6g})"


@dataclass(eq=False)
class Body:
    """
    A point mass.

    Bodies compare by identity: two distinct bodies with identical fields are
    still two bodies. Aggregate bodies built by the quadtree share this shape,
    which lets them stand in for whole subtrees as interaction sources.

    Attributes:
        position: Position in meters
        velocity: Velocity in meters per second
        acceleration: Acceleration from the most recent step
        mass: Mass in kilograms (positive for real bodies)
        radius: Drawing radius; ignored by the dynamics
        color: Opaque rendering tag, carried through untouched
    """

    position: Vector2 = field(default_factory=Vector2.zero)
    velocity: Vector2 = field(default_factory=Vector2.zero)
    acceleration: Vector2 = field(default_factory=Vector2.zero)
    mass: float = 1.0
    radius: float = 0.0
    color: Any = None

    def copy(self) -> Body:
        """Return an independent body with the same state."""
        return Body(
            position=self.position,
            velocity=self.velocity,
            acceleration=self.acceleration,
            mass=self.mass,
            radius=self.radius,
            color=self.color,
        )

    def __repr__(self) -> str:
        return (
            f"Body(position=({self.position.x:.3e}, {self.position.y:.3e}), "
            f"mass={self.mass:.3e})"
        )


@dataclass(frozen=True)
class Universe:
    """
    Snapshot of every body at one simulated instant.

    The universe is conceptually the square [0, width] x [0, width]. Bodies
    may drift outside it; the width only anchors the quadtree root.

    Attributes:
        bodies: Bodies in scenario order
        width: Side length of the universe square
    """

    bodies: Tuple[Body, ...]
    width: float

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __getitem__(self, index: int) -> Body:
        return self.bodies[index]

    def copy(self) -> Universe:
        """Return a universe holding copies of every body."""
        return Universe(tuple(body.copy() for body in self.bodies), self.width)

    def __repr__(self) -> str:
        return f"Universe(bodies={len(self.bodies)}, width={self.width:.3e})"


__all__ = [
    "EventType",
    "Event",
    "Vector2",
    "Body",
    "Universe",
]
