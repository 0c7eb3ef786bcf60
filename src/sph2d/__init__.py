from sph2d.model import MullerSPH, Parameters, newParameters
from sph2d.simulator import NumericalInstabilityError, Simulator
from sph2d.smooth_kernel import KernelCoefficients, precompute
from sph2d.world import ParticleState, World, WorldGen, initialize

__all__ = [
    'KernelCoefficients',
    'MullerSPH',
    'NumericalInstabilityError',
    'Parameters',
    'ParticleState',
    'Simulator',
    'World',
    'WorldGen',
    'initialize',
    'newParameters',
    'precompute',
]
