"""
Input validation utilities for the simulation core.

Provides centralized validation functions for bodies, universe width and
simulation parameters. Raises descriptive exceptions on invalid input so that
bad scenario data never reaches the quadtree.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Optional


class ValidationError(ValueError):
    """Base exception for simulation validation errors."""

    pass


class InvalidBodyError(ValidationError):
    """Raised when a body has a non-positive or non-finite mass."""

    def __init__(self, message: str, body_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.body_index = body_index


class EmptyUniverseError(ValidationError):
    """Raised when a universe is built without any bodies."""

    pass


class InvalidUniverseWidthError(ValidationError):
    """Raised when the universe width is not a positive finite number."""

    pass


class InvalidParameterError(ValidationError):
    """Raised when a simulation parameter is out of range."""

    pass


class UniverseBoundsWarning(UserWarning):
    """Warning issued when bodies start outside the universe square."""

    pass


def validate_mass(mass: Any, body_index: Optional[int] = None) -> float:
    """
    Validate a body mass.

    Args:
        mass: Mass value
        body_index: Index of the body in its scenario, for the error message

    Returns:
        Validated mass as float

    Raises:
        InvalidBodyError: If mass is not a positive finite number
    """
    mass = float(mass)
    where = f"Body {body_index}" if body_index is not None else "Body"
    if not math.isfinite(mass):
        raise InvalidBodyError(f"{where}: mass must be finite, got {mass}", body_index)
    if mass <= 0:
        raise InvalidBodyError(f"{where}: mass must be positive, got {mass}", body_index)
    return mass


def validate_width(width: Any) -> float:
    """
    Validate the side length of the universe square.

    Raises:
        InvalidUniverseWidthError: If width is not a positive finite number
    """
    width = float(width)
    if not math.isfinite(width) or width <= 0:
        raise InvalidUniverseWidthError(f"Universe width must be positive and finite, got {width}")
    return width


def validate_theta(theta: Any) -> float:
    """
    Validate the Barnes-Hut accuracy parameter.

    Args:
        theta: Width-to-distance threshold (0 = exact)

    Returns:
        Validated theta as float

    Raises:
        InvalidParameterError: If theta is negative or not finite
    """
    theta = float(theta)
    if not math.isfinite(theta) or theta < 0:
        raise InvalidParameterError(f"theta must be finite and >= 0, got {theta}")
    return theta


def validate_time_step(dt: Any) -> float:
    """
    Validate the integration time step.

    Raises:
        InvalidParameterError: If dt is not a positive finite number
    """
    dt = float(dt)
    if not math.isfinite(dt) or dt <= 0:
        raise InvalidParameterError(f"time step must be positive and finite, got {dt}")
    return dt


def validate_num_steps(num_steps: int) -> int:
    """
    Validate the number of time steps.

    Zero steps is allowed and yields only the initial snapshot.

    Raises:
        InvalidParameterError: If num_steps is not an integer or is < 0
    """
    if isinstance(num_steps, bool) or not isinstance(num_steps, numbers.Integral):
        raise InvalidParameterError(f"num_steps must be an integer, got {num_steps!r}")
    if num_steps < 0:
        raise InvalidParameterError(f"num_steps must be >= 0, got {num_steps}")
    return int(num_steps)


def validate_gravitational_constant(g: Any) -> float:
    """
    Validate the gravitational constant.

    Zero is allowed and turns gravity off (bodies move in straight lines).

    Raises:
        InvalidParameterError: If g is negative or not finite
    """
    g = float(g)
    if not math.isfinite(g) or g < 0:
        raise InvalidParameterError(
            f"gravitational constant must be finite and >= 0, got {g}"
        )
    return g


def validate_workers(workers: Optional[int]) -> Optional[int]:
    """
    Validate the worker thread count.

    None disables the thread pool.

    Raises:
        InvalidParameterError: If workers < 1
    """
    if workers is None:
        return None
    if workers < 1:
        raise InvalidParameterError(f"workers must be >= 1, got {workers}")
    return int(workers)


__all__ = [
    "ValidationError",
    "InvalidBodyError",
    "EmptyUniverseError",
    "InvalidUniverseWidthError",
    "InvalidParameterError",
    "UniverseBoundsWarning",
    "validate_mass",
    "validate_width",
    "validate_theta",
    "validate_time_step",
    "validate_num_steps",
    "validate_gravitational_constant",
    "validate_workers",
]
