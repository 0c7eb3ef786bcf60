import taichi as ti
import numpy as np
from dataclasses import dataclass

LATTICE_SIZE = 20 # particles per row and per column
LATTICE_OFFSET = 150.0 # distance of the lattice corner from the domain origin


@dataclass(frozen=True)
class ParticleState:
    # host side copy of the particle store, safe to hand to the renderer
    x: np.ndarray # (N, 2) positions
    v: np.ndarray # (N, 2) velocities
    f: np.ndarray # (N, 2) net forces of the last step
    rho: np.ndarray # (N,) densities
    p: np.ndarray # (N,) pressures

    def __len__(self):
        return len(self.rho)


# particle world
# save all information of all particles
@ti.data_oriented
class World(object):
    def __init__(self, particle_num):

        self.particle_num = particle_num

        self.particle_position = ti.Vector.field(2, dtype=ti.f32)
        self.particle_velocity = ti.Vector.field(2, dtype=ti.f32)
        self.particle_force = ti.Vector.field(2, dtype=ti.f32)
        self.particle_density = ti.field(dtype=ti.f32)
        self.particle_pressure = ti.field(dtype=ti.f32)

        fb = ti.FieldsBuilder()
        fb.dense(ti.i, self.particle_num).place(
                                        self.particle_position,
                                        self.particle_velocity,
                                        self.particle_force,
                                        self.particle_density,
                                        self.particle_pressure
                                    )
        self._snode_tree = fb.finalize()

    def setParticles(self, pos, vel=None):
        # load positions (and velocities), everything else starts from zero
        pos = np.asarray(pos, dtype=np.float32)
        if vel is None:
            vel = np.zeros_like(pos)
        vel = np.asarray(vel, dtype=np.float32)

        expected = (self.particle_num, 2)
        if pos.shape != expected:
            raise ValueError(f"positions must have shape {expected}, got {pos.shape}")
        if vel.shape != expected:
            raise ValueError(f"velocities must have shape {expected}, got {vel.shape}")

        self.particle_position.from_numpy(pos)
        self.particle_velocity.from_numpy(vel)
        self.particle_force.fill(0)
        self.particle_density.fill(0)
        self.particle_pressure.fill(0)

    def snapshot(self) -> ParticleState:
        return ParticleState(
            x=self.particle_position.to_numpy(),
            v=self.particle_velocity.to_numpy(),
            f=self.particle_force.to_numpy(),
            rho=self.particle_density.to_numpy(),
            p=self.particle_pressure.to_numpy(),
        )

    @ti.kernel
    def addVelocityNear(self, cx: ti.f32, cy: ti.f32, radius2: ti.f32,
                        dvx: ti.f32, dvy: ti.f32) -> ti.i32:
        # kick every particle whose squared distance to (cx, cy) is below radius2
        center = ti.Vector([cx, cy])
        kick = ti.Vector([dvx, dvy])
        count = 0
        for p_i in self.particle_position:
            if (self.particle_position[p_i] - center).norm_sqr() < radius2:
                self.particle_velocity[p_i] += kick
                count += 1
        return count


# A simple world generator
# lays out the initial fluid block
class WorldGen:
    def __init__(self, dx, rng=None):

        self.dx = dx
        self.rng = rng if rng is not None else np.random.default_rng()

        self.p_pos_list = []

    def add_lattice(self, num_x, num_y, offset, jitter=1.0):
        # regular lattice spaced by dx, each particle gets its own
        # horizontal jitter in [0, jitter)
        dx = np.float32(self.dx)
        offset = np.float32(offset)
        for i in range(num_x):
            for j in range(num_y):
                rand_x = np.float32(self.rng.random() * jitter)
                pos_x = np.float32(i) * dx + offset + rand_x
                pos_y = np.float32(j) * dx + offset
                self.p_pos_list.append([pos_x, pos_y])

    def positions(self) -> np.ndarray:
        return np.array(self.p_pos_list, dtype=np.float32).reshape(-1, 2)

    def applyToWorld(self, world):
        world.setParticles(self.positions())

    def getParticleNum(self) -> int:
        return len(self.p_pos_list)


def initialize(params, rng=None) -> np.ndarray:
    # seed fluid block: 20x20 particles spaced by the kernel radius
    gen = WorldGen(params.kernel_radius, rng)
    gen.add_lattice(LATTICE_SIZE, LATTICE_SIZE, LATTICE_OFFSET)
    return gen.positions()
