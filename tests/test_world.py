"""
Tests for the particle store and the initial fluid block.
"""

import numpy as np
import pytest

from sph2d.model import Parameters
from sph2d.world import World, WorldGen, initialize, LATTICE_OFFSET, LATTICE_SIZE


class TestInitialize:

    def test_lattice_shape(self):
        params = Parameters()
        pos = initialize(params, np.random.default_rng(0))

        assert pos.shape == (LATTICE_SIZE * LATTICE_SIZE, 2)
        assert pos.dtype == np.float32

    def test_lattice_layout(self):
        params = Parameters()
        h = params.kernel_radius
        pos = initialize(params, np.random.default_rng(1))

        # i is the outer index, j the inner one
        grid = pos.reshape(LATTICE_SIZE, LATTICE_SIZE, 2)
        expected_y = np.arange(LATTICE_SIZE, dtype=np.float32) * h + LATTICE_OFFSET
        for i in range(LATTICE_SIZE):
            np.testing.assert_allclose(grid[i, :, 1], expected_y)
            jitter = grid[i, :, 0] - (i * h + LATTICE_OFFSET)
            assert np.all(jitter >= 0.0)
            assert np.all(jitter < 1.0 + 1e-4)

    def test_jitter_drawn_per_particle(self):
        pos = initialize(Parameters(), np.random.default_rng(2))
        grid = pos.reshape(LATTICE_SIZE, LATTICE_SIZE, 2)

        # particles of one column do not share their jitter
        assert len(np.unique(grid[0, :, 0])) == LATTICE_SIZE

    def test_seeded_rng_is_reproducible(self):
        params = Parameters()
        a = initialize(params, np.random.default_rng(42))
        b = initialize(params, np.random.default_rng(42))
        c = initialize(params, np.random.default_rng(43))

        assert np.array_equal(a, b)
        assert not np.array_equal(a, c)

    def test_lattice_inside_domain(self):
        params = Parameters()
        pos = initialize(params, np.random.default_rng(3))
        margin = params.boundary_margin

        assert np.all(pos >= margin)
        assert np.all(pos[:, 0] <= params.width - margin)
        assert np.all(pos[:, 1] <= params.height - margin)


class TestWorldGen:

    def test_zero_jitter(self):
        gen = WorldGen(2.0, np.random.default_rng(0))
        gen.add_lattice(2, 3, 10.0, jitter=0.0)

        assert gen.getParticleNum() == 6
        np.testing.assert_array_equal(gen.positions(), [
            [10, 10], [10, 12], [10, 14],
            [12, 10], [12, 12], [12, 14],
        ])

    def test_apply_to_world(self):
        gen = WorldGen(1.0, np.random.default_rng(0))
        gen.add_lattice(3, 3, 5.0)
        world = World(gen.getParticleNum())
        gen.applyToWorld(world)

        np.testing.assert_array_equal(world.snapshot().x, gen.positions())


class TestWorld:

    def test_set_particles_resets_derived_state(self):
        world = World(2)
        world.setParticles([[1.0, 2.0], [3.0, 4.0]], [[0.5, 0.0], [0.0, -0.5]])
        state = world.snapshot()

        np.testing.assert_array_equal(state.x, [[1, 2], [3, 4]])
        np.testing.assert_array_equal(state.v, [[0.5, 0], [0, -0.5]])
        assert np.all(state.f == 0)
        assert np.all(state.rho == 0)
        assert np.all(state.p == 0)
        assert len(state) == 2

    def test_velocity_defaults_to_zero(self):
        world = World(1)
        world.setParticles([[1.0, 1.0]])

        assert np.all(world.snapshot().v == 0)

    @pytest.mark.parametrize("pos, vel", [
        ([[1.0, 2.0]], None),
        ([[1.0, 2.0, 3.0], [1.0, 2.0, 3.0]], None),
        ([[1.0, 2.0], [3.0, 4.0]], [[0.0, 0.0]]),
    ])
    def test_set_particles_rejects_wrong_shapes(self, pos, vel):
        world = World(2)
        with pytest.raises(ValueError):
            world.setParticles(pos, vel)

    def test_snapshot_is_a_copy(self):
        world = World(1)
        world.setParticles([[1.0, 1.0]])
        state = world.snapshot()
        state.x[0, 0] = 99.0

        assert world.snapshot().x[0, 0] == 1.0

    def test_add_velocity_near(self):
        world = World(3)
        world.setParticles([[100.0, 100.0], [103.0, 100.0], [300.0, 300.0]])

        count = world.addVelocityNear(100.0, 100.0, 50.0, 1.0, -2.0)
        state = world.snapshot()

        assert count == 2
        np.testing.assert_array_equal(state.v, [[1, -2], [1, -2], [0, 0]])
