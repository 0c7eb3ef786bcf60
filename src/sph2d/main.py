'''
Simple 2D SPH fluid simulation implemented using taichi
A block of fluid falls into a box, drag with the left mouse
button to stir it. Particles are colored by density.
'''
import logging

import taichi as ti

import sph2d.renderer as R
from sph2d.simulator import Simulator

logger = logging.getLogger(__name__)

SCREEN_HEIGHT = 500 # window height in pixels, width follows the domain aspect


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    # init taichi
    ti.init(arch=ti.cpu, default_fp=ti.f32)

    simulation = Simulator()
    params = simulation.parameters

    # init renderer
    res = (int(params.width / params.height * SCREEN_HEIGHT), SCREEN_HEIGHT)
    R.init(res)
    radius = R.particleRadiusPixels(params.kernel_radius, params.width)

    last_mouse = None
    while R.GUI.running:
        for e in R.GUI.get_events(ti.GUI.PRESS):
            if e.key == ti.GUI.ESCAPE:
                R.GUI.running = False

        mouse = R.screenToWorld(R.GUI.get_cursor_pos(), params.width, params.height)
        if last_mouse is not None and R.GUI.is_pressed(ti.GUI.LMB):
            kicked = simulation.applyImpulse(mouse, last_mouse)
            if kicked:
                logger.debug(f"kicked {kicked} particles at {mouse}")
        last_mouse = mouse

        simulation.update()

        state = simulation.snapshot()
        colors = R.scalarToColors(R.densityScalarField(state.rho))
        R.renderParticles(R.worldToScreen(state.x, params.width, params.height), colors, radius)
        R.GUI.show()


if __name__ == '__main__':
    main()
