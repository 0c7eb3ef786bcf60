'''
Smoothing kernels used by the solver
Refer to
[Muller2003] Müller, Matthias, David Charypar, and Markus Gross.
"Particle-based fluid simulation for interactive applications."
Proceedings of the 2003 ACM

The normalization constants only depend on the kernel radius h,
so they are computed once per parameter set by precompute().
'''

import math
from dataclasses import dataclass

import taichi as ti

# the density kernel keeps 65 in its denominator (Muller uses 64),
# changing it would change every density the solver produces
__POLY6_KERNEL_FACTOR = 315 / (65 * math.pi)
__SPIKY_GRAD_FACTOR = - 45 / math.pi
__VIS_LAP_FACTOR = 45 / math.pi


@dataclass(frozen=True)
class KernelCoefficients:
    poly6: float # \frac{315}{65 \pi h^9}
    spiky_grad: float # -\frac{45}{\pi h^6}
    visc_lap: float # \frac{45}{\pi h^6}
    kernel_radius_squared: float # h^2


def precompute(params) -> KernelCoefficients:
    # pure function of params.kernel_radius, mass and the rest are ignored
    h = params.kernel_radius
    return KernelCoefficients(
        poly6=__POLY6_KERNEL_FACTOR / h ** 9,
        spiky_grad=__SPIKY_GRAD_FACTOR / h ** 6,
        visc_lap=__VIS_LAP_FACTOR / h ** 6,
        kernel_radius_squared=h * h,
    )


@ti.func
def poly6Kernel(r2, h2, poly6):
    # poly6 (h^2 - |r|^2)^3, only valid for |r|^2 < h^2
    tmp = h2 - r2
    return poly6 * tmp * tmp * tmp


@ti.func
def spikyGrad(r_len, h, spiky_grad):
    # magnitude part of the spiky gradient: spiky_grad (h - |r|)^2
    tmp = h - r_len
    return spiky_grad * tmp * tmp


@ti.func
def viscosityLap(r_len, h, visc_lap):
    # visc_lap (h - |r|)
    return visc_lap * (h - r_len)
