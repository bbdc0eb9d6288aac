"""
Barnes-Hut gravitational simulation driver.

Based on:
"A hierarchical O(N log N) force-calculation algorithm" by Barnes and Hut (1986)

Every step:
- A fresh quadtree is built over the current snapshot
- Each body collects its interaction set with the theta criterion
- Each body is integrated against that set into a new snapshot

All force evaluation for step k -> k+1 reads only the step-k snapshot and
tree, so the per-body updates are independent and may run on a thread pool.
"""

from __future__ import annotations

import contextlib
import logging
import warnings
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, ContextManager, Iterable, List, Optional

from .base import BaseSimulation
from .force import select_interaction_set
from .integrator import G, integrate
from .spatial.quadtree import Quadrant, QuadTree, QuadTreeError
from .types import Body, Event, EventType, Universe
from .validation import (
    EmptyUniverseError,
    UniverseBoundsWarning,
    validate_gravitational_constant,
    validate_mass,
    validate_theta,
    validate_time_step,
    validate_width,
)

logger = logging.getLogger(__name__)


class SimulationStepError(RuntimeError):
    """
    Raised when a time step cannot be completed.

    Attributes:
        step: Index of the step that failed (0 = first step)
        body_index: Index of the offending body, if known
    """

    def __init__(
        self, message: str, step: Optional[int] = None, body_index: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.step = step
        self.body_index = body_index


def build_universe(bodies: Iterable[Body], width: float) -> Universe:
    """
    Build the initial snapshot from scenario bodies.

    Bodies are copied so that later changes by the caller cannot leak into
    the snapshot.

    Args:
        bodies: Scenario bodies in their intended order
        width: Side length of the universe square

    Returns:
        New Universe

    Raises:
        EmptyUniverseError: If there are no bodies
        InvalidBodyError: If a body has a non-positive or non-finite mass
        InvalidUniverseWidthError: If width is not positive and finite
    """
    width = validate_width(width)
    copies = tuple(body.copy() for body in bodies)
    if not copies:
        raise EmptyUniverseError("A universe needs at least one body")

    for i, body in enumerate(copies):
        body.mass = validate_mass(body.mass, body_index=i)

    bounds = Quadrant(0.0, 0.0, width)
    outside = sum(1 for body in copies if not bounds.contains(body.position))
    if outside:
        warnings.warn(
            f"{outside} of {len(copies)} bodies start outside the universe square "
            f"[0, {width:g}]. They are simulated normally but the quadtree is "
            "less balanced.",
            UniverseBoundsWarning,
            stacklevel=2,
        )

    return Universe(copies, width)


def update_universe(
    universe: Universe,
    dt: float,
    theta: float,
    g: float = G,
    executor: Optional[Executor] = None,
    step: Optional[int] = None,
) -> Universe:
    """
    Advance a snapshot by one time step.

    Args:
        universe: Snapshot at step k (not modified)
        dt: Time step in seconds
        theta: Barnes-Hut threshold
        g: Gravitational constant
        executor: Optional executor to spread per-body updates over
        step: Step index, for diagnostics

    Returns:
        Snapshot at step k + 1, bodies in the same order

    Raises:
        SimulationStepError: If the quadtree cannot be built or queried
    """
    dt = validate_time_step(dt)
    theta = validate_theta(theta)
    g = validate_gravitational_constant(g)
    try:
        tree = QuadTree.from_universe(universe)
    except QuadTreeError as err:
        raise SimulationStepError(
            f"Step {step}: quadtree construction failed at body {err.body_index}: {err}",
            step=step,
            body_index=err.body_index,
        ) from err

    def advance(index: int) -> Body:
        body = universe.bodies[index]
        try:
            interactions = select_interaction_set(tree, body, theta)
        except QuadTreeError as err:
            raise SimulationStepError(
                f"Step {step}: force approximation failed for body {index}: {err}",
                step=step,
                body_index=index,
            ) from err
        return integrate(body, interactions, dt, g)

    indices = range(len(universe.bodies))
    if executor is None:
        bodies = [advance(i) for i in indices]
    else:
        bodies = list(executor.map(advance, indices))

    return Universe(tuple(bodies), universe.width)


class BarnesHutSimulation(BaseSimulation):
    """
    Barnes-Hut N-body simulation.

    Produces num_steps + 1 snapshots; index 0 is the initial universe itself.

    Example:
        sim = BarnesHutSimulation(
            universe=build_universe(bodies, width=1.0e23),
            num_steps=1000,
            time_step=2e14,
            theta=0.5,
        )
        sim.run()

        for snapshot in sim.snapshots:
            draw(snapshot)
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
        super().__init__(
            universe=universe,
            num_steps=num_steps,
            time_step=time_step,
            theta=theta,
            gravitational_constant=gravitational_constant,
            workers=workers,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )

        # Internal state
        self._snapshots: List[Universe] = []
        self._step: int = 0
        self._executor: Optional[Executor] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def snapshots(self) -> List[Universe]:
        """Get every snapshot produced so far, starting with the initial one."""
        return self._snapshots

    @property
    def current(self) -> Optional[Universe]:
        """Get the latest snapshot."""
        if self._snapshots:
            return self._snapshots[-1]
        return self._universe

    @property
    def step(self) -> int:
        """Get the number of completed steps."""
        return self._step

    @property
    def elapsed_time(self) -> float:
        """Get simulated seconds since the initial snapshot."""
        return self._step * self._time_step

    # -------------------------------------------------------------------------
    # Simulation Implementation
    # -------------------------------------------------------------------------

    def reset(self) -> Universe:
        """
        Return to the initial snapshot.

        Returns:
            The initial snapshot

        Raises:
            EmptyUniverseError: If no universe has been set
        """
        if self._universe is None:
            raise EmptyUniverseError("No universe to simulate")
        self._snapshots = [self._universe]
        self._step = 0
        return self._universe

    def _executor_context(self) -> ContextManager[Optional[Executor]]:
        if self._workers is None:
            return contextlib.nullcontext()
        return ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="barnes-hut")

    def run(self, **kwargs: Any) -> "BarnesHutSimulation":
        """
        Run the simulation from the initial snapshot.

        Returns:
            self for chaining

        Raises:
            EmptyUniverseError: If no universe has been set
            SimulationStepError: If a step fails; earlier snapshots are kept
        """
        initial = self.reset()

        logger.info(
            "Running %d steps over %d bodies (dt=%g, theta=%g, workers=%s)",
            self._num_steps,
            len(initial),
            self._time_step,
            self._theta,
            self._workers,
        )
        self.trigger(
            {"type": EventType.start, "step": 0, "time": 0.0, "universe": initial}
        )

        with self._executor_context() as executor:
            self._executor = executor
            try:
                self.kick()
            finally:
                self._executor = None

        logger.info("Simulation finished after %d steps", self._step)
        self.trigger(
            {
                "type": EventType.end,
                "step": self._step,
                "time": self.elapsed_time,
                "universe": self.current,
            }
        )
        return self

    def tick(self) -> bool:
        """
        Advance the simulation by one step.

        Returns:
            True if all steps are done, False otherwise.
        """
        if not self._snapshots:
            self.reset()

        if self._step >= self._num_steps:
            return True

        nxt = update_universe(
            self._snapshots[-1],
            self._time_step,
            self._theta,
            self._gravitational_constant,
            executor=self._executor,
            step=self._step,
        )
        self._snapshots.append(nxt)
        self._step += 1
        logger.debug("Completed step %d/%d", self._step, self._num_steps)

        self.trigger(
            {
                "type": EventType.tick,
                "step": self._step,
                "time": self.elapsed_time,
                "universe": nxt,
            }
        )
        return self._step >= self._num_steps


def run_steps(
    initial: Universe,
    num_steps: int,
    dt: float,
    theta: float,
    *,
    gravitational_constant: float = G,
    workers: Optional[int] = None,
    on_step: Optional[Callable[[Optional[Event]], None]] = None,
) -> List[Universe]:
    """
    Simulate num_steps steps and return every snapshot.

    Args:
        initial: Snapshot at time 0
        num_steps: Number of steps
        dt: Seconds per step
        theta: Barnes-Hut threshold (0 = exact)
        gravitational_constant: G in m^3 kg^-1 s^-2
        workers: Worker threads per step (None = calling thread only)
        on_step: Callback fired after every step

    Returns:
        num_steps + 1 snapshots; the first is initial itself
    """
    sim = BarnesHutSimulation(
        universe=initial,
        num_steps=num_steps,
        time_step=dt,
        theta=theta,
        gravitational_constant=gravitational_constant,
        workers=workers,
        on_tick=on_step,
    )
    return sim.run().snapshots


__all__ = [
    "SimulationStepError",
    "build_universe",
    "update_universe",
    "BarnesHutSimulation",
    "run_steps",
]
