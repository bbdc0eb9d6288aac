"""
Base class for time-stepped simulations.

Provides the shared infrastructure used by BarnesHutSimulation:

- Event system (start/tick/end events)
- Validated configuration properties (time step, theta, step count, ...)
- Tick-based step loop
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from .integrator import G
from .types import Event, EventType, Universe
from .validation import (
    validate_gravitational_constant,
    validate_num_steps,
    validate_theta,
    validate_time_step,
    validate_workers,
)


class BaseSimulation(ABC):
    """
    Abstract base class for simulations that advance a Universe in steps.

    Example:
        sim = SomeSimulation(
            universe=universe,
            num_steps=100,
            time_step=2e14,
            theta=0.5,
        )
        sim.run()

        for snapshot in sim.snapshots:
            ...
    """

    def __init__(
        self,
        *,
        universe: Optional[Universe] = None,
        num_steps: int = 1,
        time_step: float = 1.0,
        theta: float = 0.5,
        gravitational_constant: float = G,
        workers: Optional[int] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize simulation with configuration.

        Args:
            universe: Initial snapshot
            num_steps: Number of time steps to run (0 keeps only the initial snapshot)
            time_step: Seconds per step
            theta: Barnes-Hut accuracy (0 = exact, 0.5 = balanced)
            gravitational_constant: G in m^3 kg^-1 s^-2
            workers: Worker threads per step. None runs on the calling thread.
            on_start: Callback for start event
            on_tick: Callback fired after every step
            on_end: Callback for end event
        """
        self._universe: Optional[Universe] = universe
        self._num_steps: int = validate_num_steps(num_steps)
        self._time_step: float = validate_time_step(time_step)
        self._theta: float = validate_theta(theta)
        self._gravitational_constant: float = validate_gravitational_constant(
            gravitational_constant
        )
        self._workers: Optional[int] = validate_workers(workers)
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def universe(self) -> Optional[Universe]:
        """Get the initial snapshot."""
        return self._universe

    @universe.setter
    def universe(self, value: Universe) -> None:
        """Set the initial snapshot."""
        self._universe = value

    @property
    def num_steps(self) -> int:
        """Get the number of steps to run."""
        return self._num_steps

    @num_steps.setter
    def num_steps(self, value: int) -> None:
        """
        Set the number of steps to run.

        Raises:
            InvalidParameterError: If value is negative.
        """
        self._num_steps = validate_num_steps(value)

    @property
    def time_step(self) -> float:
        """Get seconds per step."""
        return self._time_step

    @time_step.setter
    def time_step(self, value: float) -> None:
        """
        Set seconds per step.

        Raises:
            InvalidParameterError: If value is not positive and finite.
        """
        self._time_step = validate_time_step(value)

    @property
    def theta(self) -> float:
        """Get Barnes-Hut theta parameter (accuracy)."""
        return self._theta

    @theta.setter
    def theta(self, value: float) -> None:
        """
        Set Barnes-Hut theta parameter.

        Raises:
            InvalidParameterError: If value is negative or not finite.
        """
        self._theta = validate_theta(value)

    @property
    def gravitational_constant(self) -> float:
        """Get the gravitational constant."""
        return self._gravitational_constant

    @gravitational_constant.setter
    def gravitational_constant(self, value: float) -> None:
        """
        Set the gravitational constant.

        Raises:
            InvalidParameterError: If value is negative or not finite
        """
        self._gravitational_constant = validate_gravitational_constant(value)

    @property
    def workers(self) -> Optional[int]:
        """Get worker thread count (None = no thread pool)."""
        return self._workers

    @workers.setter
    def workers(self, value: Optional[int]) -> None:
        """Set worker thread count."""
        self._workers = validate_workers(value)

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a simulation event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the simulation.

        Implementations should:
        1. Reset state to the initial snapshot
        2. Advance num_steps steps
        3. Fire appropriate events

        Returns:
            self (for chaining)
        """
        pass

    @abstractmethod
    def tick(self) -> bool:
        """
        Advance the simulation by one step.

        Returns:
            True if all steps are done, False if more steps remain.
        """
        pass

    def kick(self) -> None:
        """Run tick() repeatedly until num_steps is reached."""
        for _ in range(self._num_steps):
            if self.tick():
                break


__all__ = ["BaseSimulation"]
