'''
Render part
Draws particles colored by density, the solver itself never calls this
'''
import taichi as ti
import numpy as np

__SCREEN_RES = None # screen resolution tuple: (width, height)
GUI = None

__BG_COLOR = 0x004000
__DENSE_COLOR = 0x0033cc # color of the densest particles
__SPARSE_COLOR = 0xe6f2ff # color of the sparsest particles


def init(res, title='SPH2D'):
    global __SCREEN_RES
    global GUI
    __SCREEN_RES = res
    GUI = ti.GUI(title, res)


def densityScalarField(density: np.ndarray) -> np.ndarray:
    # negated density, min/max mapped into [0, 1]
    values = -np.asarray(density, dtype=np.float32)
    lo = values.min()
    hi = values.max()
    if hi == lo:
        return np.zeros_like(values)
    return (values - lo) / (hi - lo)


def scalarToColors(values: np.ndarray) -> np.ndarray:
    # linear blend from the dense to the sparse color, per channel
    values = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)[:, None]
    shifts = np.array([16, 8, 0])
    dense = (__DENSE_COLOR >> shifts) & 0xff
    sparse = (__SPARSE_COLOR >> shifts) & 0xff
    rgb = np.rint(dense + (sparse - dense) * values).astype(np.int64)
    return (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]


def worldToScreen(positions: np.ndarray, width, height) -> np.ndarray:
    # convert positions in simulation world to the [0, 1] canvas
    return np.asarray(positions, dtype=np.float32) / np.array([width, height], dtype=np.float32)


def screenToWorld(cursor, width, height) -> np.ndarray:
    return np.array([cursor[0] * width, cursor[1] * height], dtype=np.float32)


def particleRadiusPixels(kernel_radius, width) -> float:
    # particles are drawn with half the kernel radius
    return 0.5 * kernel_radius * __SCREEN_RES[0] / width


def renderParticles(circle_positions: np.ndarray, colors: np.ndarray, radius: float):
    GUI.canvas.clear(__BG_COLOR)
    GUI.circles(circle_positions, radius=radius, color=colors)
