"""
barnes-hut: 2D gravitational N-body simulation with the Barnes-Hut approximation.

This package advances a collection of point masses through discrete time
steps. Instead of evaluating all O(n^2) pairwise forces, each step builds a
quadtree that summarizes mass hierarchically and lets distant clusters act
as a single aggregate body.

Main pieces:
- spatial: Quadtree with incrementally maintained centres of mass
- force: Theta-criterion selection of interaction sets
- integrator: Newtonian gravity and the per-body kinematic update
- simulation: Step driver producing one immutable snapshot per step
- metrics: Energy, momentum and force-error diagnostics
"""

__version__ = "0.1.0"

# Base class for simulations
from .base import BaseSimulation

# Force approximation
from .force import select_interaction_set

# Gravity and integration
from .integrator import G, direct_net_force, gravity_force, integrate, net_force

# Diagnostics
from .metrics import (
    center_of_mass,
    direct_forces,
    force_error,
    kinetic_energy,
    potential_energy,
    simulation_summary,
    total_energy,
    total_momentum,
)

# Simulation driver
from .simulation import (
    BarnesHutSimulation,
    SimulationStepError,
    build_universe,
    run_steps,
    update_universe,
)

# Spatial data structures
from .spatial import (
    DegenerateGeometryError,
    EmptyNode,
    InternalNode,
    LeafNode,
    Quadrant,
    QuadTree,
    QuadTreeError,
    TreeInvariantError,
    merge_aggregate,
)

# Shared types
from .types import Body, Event, EventType, Universe, Vector2

# Validation utilities
from .validation import (
    EmptyUniverseError,
    InvalidBodyError,
    InvalidParameterError,
    InvalidUniverseWidthError,
    UniverseBoundsWarning,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Vector2",
    "Body",
    "Universe",
    "EventType",
    "Event",
    # Base classes
    "BaseSimulation",
    # Spatial data structures
    "Quadrant",
    "QuadTree",
    "EmptyNode",
    "LeafNode",
    "InternalNode",
    "merge_aggregate",
    "QuadTreeError",
    "DegenerateGeometryError",
    "TreeInvariantError",
    # Force approximation
    "select_interaction_set",
    # Gravity and integration
    "G",
    "gravity_force",
    "net_force",
    "direct_net_force",
    "integrate",
    # Simulation driver
    "BarnesHutSimulation",
    "SimulationStepError",
    "build_universe",
    "update_universe",
    "run_steps",
    # Metrics
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "total_momentum",
    "center_of_mass",
    "direct_forces",
    "force_error",
    "simulation_summary",
    # Validation
    "ValidationError",
    "InvalidBodyError",
    "EmptyUniverseError",
    "InvalidUniverseWidthError",
    "InvalidParameterError",
    "UniverseBoundsWarning",
]
