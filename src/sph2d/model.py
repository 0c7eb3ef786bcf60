'''
Major part of SPH implementation
Density/pressure, forces and integration passes of the
Muller SPH solver, brute force over all particle pairs

Reference Paper:
1. Particle-based fluid simulation for interactive applications
    Matthias Muller   David Charypar   Markus Gross
'''

import math
from dataclasses import dataclass

import taichi as ti

import sph2d.smooth_kernel as sk

_BOUND_DAMPING = -0.5 # velocity factor applied when a particle hits a wall
_BOUND_MARGIN_FAC = 0.5 # walls are inset by this fraction of the kernel radius


@dataclass(frozen=True)
class Parameters:
    # physical and numerical constants, fixed for a run
    gravity: tuple = (0.0, -9.8 * 12000.0)
    rest_density: float = 1000.0
    gas_constant: float = 2000.0 # stiffness of the equation of state
    kernel_radius: float = 16.0 # h
    mass: float = 65.0
    viscosity: float = 250.0
    dt: float = 0.0008
    width: float = 500.0
    height: float = 500.0

    def __post_init__(self):
        gravity = tuple(float(g) for g in self.gravity)
        if len(gravity) != 2 or not all(math.isfinite(g) for g in gravity):
            raise ValueError(f"gravity must be a finite 2-vector, got {self.gravity!r}")
        object.__setattr__(self, 'gravity', gravity)

        for name in ('rest_density', 'gas_constant', 'kernel_radius', 'mass',
                     'viscosity', 'width', 'height'):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be finite and positive, got {value!r}")

        # dt = 0 is allowed, integration then leaves particles in place
        if not math.isfinite(self.dt) or self.dt < 0:
            raise ValueError(f"dt must be finite and non-negative, got {self.dt!r}")

    @property
    def boundary_margin(self):
        return self.kernel_radius * _BOUND_MARGIN_FAC


def newParameters() -> Parameters:
    return Parameters()


@ti.data_oriented
class MullerSPH(object):
    # The class is reponsible for particle status update
    # it is bounded with the particle fields of a World using bindWorld()

    def __init__(self, params: Parameters, serialize=True):
        self.params = params
        self.coeffs = sk.precompute(params)

        # keep the python scalars around, kernels read them as constants
        self.g_x, self.g_y = params.gravity
        self.rho_0 = params.rest_density
        self.k = params.gas_constant
        self.dh = params.kernel_radius
        self.dh2 = self.coeffs.kernel_radius_squared
        self.poly6 = self.coeffs.poly6
        self.spiky_grad = self.coeffs.spiky_grad
        self.visc_lap = self.coeffs.visc_lap
        self.m = params.mass
        self.mu = params.viscosity
        self.dt = params.dt

        margin = params.boundary_margin
        self.left_bound = margin
        self.bottom_bound = margin
        self.right_bound = params.width - margin
        self.top_bound = params.height - margin
        self.bound_damping = _BOUND_DAMPING

        # process particles one at a time in index order, like a plain loop
        self.serialize = serialize

        # these data are reference, would be bounded using bindWorld()
        self.particle_position = None
        self.particle_velocity = None
        self.particle_force = None
        self.particle_density = None
        self.particle_pressure = None

    # bind refernce
    def bindWorld(self, world):
        self.particle_position = world.particle_position
        self.particle_velocity = world.particle_velocity
        self.particle_force = world.particle_force
        self.particle_density = world.particle_density
        self.particle_pressure = world.particle_pressure

    @ti.kernel
    def calcDensityPressure(self):
        # density by summing all particles within h, the particle itself included
        ti.loop_config(serialize=self.serialize)
        for pa_idx in self.particle_position:
            pos_a = self.particle_position[pa_idx]

            rho = 0.0
            for pb_idx in range(self.particle_position.shape[0]):
                r2 = (self.particle_position[pb_idx] - pos_a).norm_sqr()
                if r2 < self.dh2:
                    rho += self.m * sk.poly6Kernel(r2, self.dh2, self.poly6)

            self.particle_density[pa_idx] = rho
            # linear equation of state, negative pressure is kept
            self.particle_pressure[pa_idx] = self.k * (rho - self.rho_0)

    @ti.kernel
    def calcForces(self):
        # needs every density of the step, run after calcDensityPressure
        ti.loop_config(serialize=self.serialize)
        for pa_idx in self.particle_position:
            pos_a = self.particle_position[pa_idx]
            vel_a = self.particle_velocity[pa_idx]
            P_a = self.particle_pressure[pa_idx]

            press = ti.Vector([0.0, 0.0], dt=ti.f32)
            visc = ti.Vector([0.0, 0.0], dt=ti.f32)
            for pb_idx in range(self.particle_position.shape[0]):
                if pb_idx != pa_idx:
                    x_ba = self.particle_position[pb_idx] - pos_a
                    r = x_ba.norm()
                    if r < self.dh:
                        rho_b = self.particle_density[pb_idx]
                        P_b = self.particle_pressure[pb_idx]
                        vel_b = self.particle_velocity[pb_idx]

                        # symmetric pressure term, pushes a away from b
                        press += -x_ba.normalized() * self.m * (P_a + P_b) / (2.0 * rho_b) * \
                                sk.spikyGrad(r, self.dh, self.spiky_grad)
                        # viscosity relaxes the velocity difference
                        visc += self.mu * self.m * (vel_b - vel_a) / rho_b * \
                                sk.viscosityLap(r, self.dh, self.visc_lap)

            # gravity as a force per unit volume, divided out again in updateStatus
            grav = ti.Vector([self.g_x, self.g_y], dt=ti.f32) * self.particle_density[pa_idx]
            self.particle_force[pa_idx] = press + visc + grav

    @ti.kernel
    def updateStatus(self):
        # Semi-implicit Euler, then walls
        ti.loop_config(serialize=self.serialize)
        for p_i in self.particle_position:
            self.particle_velocity[p_i] += self.dt * self.particle_force[p_i] / self.particle_density[p_i]
            self.particle_position[p_i] += self.dt * self.particle_velocity[p_i]

            # each side is checked on its own
            if self.particle_position[p_i][0] < self.left_bound:
                self.particle_velocity[p_i][0] *= self.bound_damping
                self.particle_position[p_i][0] = self.left_bound
            if self.particle_position[p_i][1] < self.bottom_bound:
                self.particle_velocity[p_i][1] *= self.bound_damping
                self.particle_position[p_i][1] = self.bottom_bound
            if self.particle_position[p_i][0] > self.right_bound:
                self.particle_velocity[p_i][0] *= self.bound_damping
                self.particle_position[p_i][0] = self.right_bound
            if self.particle_position[p_i][1] > self.top_bound:
                self.particle_velocity[p_i][1] *= self.bound_damping
                self.particle_position[p_i][1] = self.top_bound

    def step(self):
        # fixed order, every pass finishes before the next one starts
        self.calcDensityPressure()
        self.calcForces()
        self.updateStatus()
