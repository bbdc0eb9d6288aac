"""Tests for simulation diagnostics."""

import random

import pytest

from barnes_hut import Body, QuadTree, Universe, Vector2, direct_net_force
from barnes_hut.metrics import (
    center_of_mass,
    direct_forces,
    force_error,
    kinetic_energy,
    potential_energy,
    simulation_summary,
    total_energy,
    total_momentum,
)


def make_body(x, y, mass=1.0, vx=0.0, vy=0.0):
    return Body(position=Vector2(x, y), velocity=Vector2(vx, vy), mass=mass)


def random_universe(n, width=1000.0, seed=42):
    rng = random.Random(seed)
    bodies = tuple(
        make_body(rng.uniform(0, width), rng.uniform(0, width), rng.uniform(1.0, 10.0))
        for _ in range(n)
    )
    return Universe(bodies, width)


class TestEnergy:
    """Tests for energy metrics."""

    def test_kinetic_energy(self):
        """0.5 * 2 * (3^2 + 4^2) = 25."""
        universe = Universe((make_body(0.0, 0.0, mass=2.0, vx=3.0, vy=4.0),), 10.0)
        assert kinetic_energy(universe) == pytest.approx(25.0)

    def test_at_rest(self):
        """Bodies at rest have no kinetic energy."""
        assert kinetic_energy(random_universe(10)) == 0.0

    def test_potential_energy_pair(self):
        """-G m1 m2 / r for a single pair."""
        universe = Universe((make_body(0.0, 0.0, mass=2.0), make_body(3.0, 4.0, mass=3.0)), 10.0)
        assert potential_energy(universe, g=1.0) == pytest.approx(-1.2)

    def test_potential_energy_single_body(self):
        """One body has no pairs."""
        universe = Universe((make_body(1.0, 1.0),), 10.0)
        assert potential_energy(universe) == 0.0

    def test_potential_energy_three_bodies(self):
        """Every unordered pair is counted once."""
        universe = Universe(
            (make_body(0.0, 0.0), make_body(1.0, 0.0), make_body(0.0, 2.0)),
            10.0,
        )
        expected = -(1.0 / 1.0 + 1.0 / 2.0 + 1.0 / 5.0**0.5)
        assert potential_energy(universe, g=1.0) == pytest.approx(expected)

    def test_total_energy(self):
        """Total energy is kinetic plus potential."""
        universe = Universe(
            (make_body(0.0, 0.0, mass=2.0, vx=1.0), make_body(3.0, 4.0, mass=3.0)),
            10.0,
        )
        assert total_energy(universe, g=1.0) == pytest.approx(1.0 - 1.2)


class TestMomentumAndCentroid:
    """Tests for momentum and centre of mass."""

    def test_total_momentum(self):
        universe = Universe(
            (make_body(0.0, 0.0, mass=2.0, vx=1.0, vy=-1.0), make_body(5.0, 5.0, mass=3.0, vy=2.0)),
            10.0,
        )
        p = total_momentum(universe)
        assert p.x == pytest.approx(2.0)
        assert p.y == pytest.approx(4.0)

    def test_center_of_mass_matches_tree(self):
        """The numpy centroid agrees with the quadtree root aggregate."""
        universe = random_universe(80)
        tree = QuadTree.from_universe(universe)

        com = center_of_mass(universe)
        assert com.x == pytest.approx(tree.center_of_mass.x, rel=1e-9)
        assert com.y == pytest.approx(tree.center_of_mass.y, rel=1e-9)


class TestForces:
    """Tests for direct forces and force error."""

    def test_direct_forces_match_scalar_sum(self):
        """Vectorized forces agree with direct_net_force."""
        universe = random_universe(30, seed=6)
        forces = direct_forces(universe, g=1.0)

        assert forces.shape == (30, 2)
        for i, body in enumerate(universe.bodies):
            expected = direct_net_force(body, universe.bodies, g=1.0)
            assert forces[i, 0] == pytest.approx(expected.x, rel=1e-9, abs=1e-15)
            assert forces[i, 1] == pytest.approx(expected.y, rel=1e-9, abs=1e-15)

    def test_direct_forces_skip_coincident(self):
        """Coincident bodies contribute nothing."""
        universe = Universe((make_body(1.0, 1.0), make_body(1.0, 1.0)), 10.0)
        forces = direct_forces(universe)
        assert (forces == 0.0).all()

    def test_force_error_exact_at_theta_zero(self):
        """theta = 0 reproduces direct summation."""
        universe = random_universe(50, seed=1)
        assert force_error(universe, 0.0, g=1.0) < 1e-9

    def test_force_error_grows_with_theta(self):
        """Coarser approximation has a measurable error."""
        universe = random_universe(100, seed=1)
        assert force_error(universe, 1.0, g=1.0) > force_error(universe, 0.0, g=1.0)


class TestSimulationSummary:
    """Tests for simulation_summary."""

    def test_keys(self):
        universe = random_universe(10)
        summary = simulation_summary(universe)

        assert summary["bodies"] == 10
        assert summary["total_mass"] == pytest.approx(sum(b.mass for b in universe.bodies))
        assert "force_error" not in summary
        for key in ("kinetic_energy", "potential_energy", "total_energy", "momentum", "center_of_mass"):
            assert key in summary

    def test_with_theta(self):
        summary = simulation_summary(random_universe(10), theta=0.5)
        assert summary["force_error"] >= 0.0
