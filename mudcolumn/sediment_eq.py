r"""
Holistic sediment transport equation

.. math::
    \frac{\partial c}{\partial t} =
        \frac{\partial}{\partial z}\left(K \frac{\partial c}{\partial z}\right)
        + \frac{\partial (w_s c)}{\partial z}

The holistic diffusivity :math:`K` combines consolidation, turbulent
diffusion and shear mixing, so the same equation describes suspension,
fluid mud and the consolidating bed (Gibson equation). The settling flux is
upwinded from the cell above each face. No sediment crosses the bed or the
free surface, hence the column integral of :math:`c` is conserved.
"""
from .utility import *
from .equation import VerticalEquation, BoundaryCondition


class SedimentEquation(VerticalEquation):
    """
    Sediment mass concentration equation with hindered settling
    """
    name = 'sediment_1d'

    def solve(self, c, dt, diffusivity, settling_velocity):
        """
        Advance concentration by one time step

        :arg c: concentration array, updated in place over the active cells
        :arg float dt: time step
        :arg diffusivity: holistic diffusivity
        :arg settling_velocity: settling velocity magnitude
        """
        n = self.mesh.n_active
        bnd_conditions = {
            'bottom': BoundaryCondition.flux(0.0),
            'top': BoundaryCondition.flux(0.0),
        }
        return self.solve_system(c, n, self.mesh.dz, dt, 1.0, diffusivity,
                                 bnd_conditions,
                                 settling_velocity=settling_velocity)
