import logging

import numpy as np

from sph2d.model import MullerSPH, Parameters
from sph2d.world import World, ParticleState, initialize

logger = logging.getLogger(__name__)

IMPULSE_MAGNITUDE = 20000.0 # speed added by one mouse drag
IMPULSE_RADIUS_SQUARED = 50.0 # squared distance to the drag point


class NumericalInstabilityError(FloatingPointError):
    """Raised when the particle state contains NaN or infinite values."""

    def __init__(self, bad_particles, step):
        self.bad_particles = bad_particles
        self.step = step
        super().__init__(f"{bad_particles} particle(s) have non-finite state after step {step}")


class Simulator(object):
    """Owns the parameters, the particle world and the SPH model.

    Simulator() gives a ready to step simulation with the default
    parameters and a freshly jittered fluid block. Pass seed (or rng)
    to make the jitter reproducible, or positions to start from a
    given particle layout.

    taichi must be initialized before a Simulator is created.
    """

    def __init__(self, parameters: Parameters = None, seed=None, rng=None,
                 positions=None, velocities=None, serialize=True):
        self.parameters = parameters if parameters is not None else Parameters()

        if positions is None:
            if rng is None:
                rng = np.random.default_rng(seed)
            positions = initialize(self.parameters, rng)
        positions = np.asarray(positions, dtype=np.float32)

        self.world = World(len(positions))
        self.world.setParticles(positions, velocities)

        self.sph_model = MullerSPH(self.parameters, serialize=serialize)
        self.sph_model.bindWorld(self.world)

        self.step_count = 0

        logger.info(f"Simulator created for {self.world.particle_num} particles.")
        logger.info(f"Parameters: {self.parameters}")

    @property
    def coefficients(self):
        return self.sph_model.coeffs

    @property
    def width(self):
        return self.parameters.width

    @property
    def height(self):
        return self.parameters.height

    @property
    def particle_num(self):
        return self.world.particle_num

    # the main looped step of the simulation
    def update(self, check_finite=False):
        self.sph_model.step()
        self.step_count += 1
        logger.debug(f"step {self.step_count} done")
        if check_finite:
            self.checkFinite()

    def snapshot(self) -> ParticleState:
        return self.world.snapshot()

    def checkFinite(self):
        state = self.snapshot()
        bad = ~(np.isfinite(state.x).all(axis=1)
                & np.isfinite(state.v).all(axis=1)
                & np.isfinite(state.rho))
        bad_particles = int(np.count_nonzero(bad))
        if bad_particles:
            logger.warning(f"{bad_particles} particle(s) went non-finite, first index {int(np.argmax(bad))}.")
            raise NumericalInstabilityError(bad_particles, self.step_count)

    def applyImpulse(self, point, previous_point) -> int:
        # push particles near point along the drag direction,
        # only call this between two update() calls
        point = np.asarray(point, dtype=np.float32)
        drag = point - np.asarray(previous_point, dtype=np.float32)
        length = float(np.hypot(drag[0], drag[1]))
        if length == 0.0:
            return 0
        kick = drag / length * IMPULSE_MAGNITUDE
        return self.world.addVelocityNear(float(point[0]), float(point[1]), IMPULSE_RADIUS_SQUARED,
                                          float(kick[0]), float(kick[1]))
