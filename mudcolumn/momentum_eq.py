r"""
Momentum equation of the 1DV column

.. math::
    \rho \frac{\partial u}{\partial t} =
        \frac{\partial}{\partial z}\left(\mu \frac{\partial u}{\partial z}\right)
        + \rho a

where :math:`a` is the tidal surface slope acceleration and
:math:`\mu = \mu_{rh} + \rho \nu_t` the effective dynamic viscosity.

At the surface the wind stress :math:`\tau_s` is imposed. At the bed either
a no-slip condition or a quadratic log-law drag is used

.. math::
    \tau_b = \rho C_D |u_b| u_b, \quad
    C_D = \left( \frac{\kappa}{\ln (z_b + z_0)/z_0} \right)^2

where :math:`z_b` is the height of the first cell center and
:math:`z_0 = k_s/30` the roughness length.
"""
from .utility import *
from .equation import VerticalEquation, BoundaryCondition


def log_law_drag_coefficient(z_b, roughness):
    """
    Quadratic drag coefficient from the law of the wall

    :arg float z_b: distance of the velocity point from the bed
    :arg float roughness: Nikuradse roughness :math:`k_s`
    """
    z0 = roughness/30.0
    kappa = physical_constants['von_karman']
    return (kappa/numpy.log((z_b + z0)/z0))**2


class MomentumEquation(VerticalEquation):
    """
    Momentum equation with tidal body force, wind stress and bed friction
    """
    name = 'uv_1d'

    def __init__(self, mesh, theta=1.0, bottom_boundary_condition='no-slip',
                 bottom_roughness=3.2e-3):
        """
        :arg mesh: :class:`.VerticalMesh` object
        :kwarg float theta: implicitness parameter
        :kwarg str bottom_boundary_condition: 'no-slip' or 'log-law'
        :kwarg float bottom_roughness: Nikuradse roughness of the bed
        """
        super(MomentumEquation, self).__init__(mesh, theta=theta)
        if bottom_boundary_condition not in ['no-slip', 'log-law']:
            raise ValueError('Unknown bottom boundary condition: ' + bottom_boundary_condition)
        self.bottom_boundary_condition = bottom_boundary_condition
        self.bottom_roughness = bottom_roughness

    def bottom_bc(self, uv, rho):
        """Boundary condition at the bed for the current state"""
        if self.bottom_boundary_condition == 'no-slip':
            return BoundaryCondition.value(0.0)
        z_b = 0.5*self.mesh.dz[0]
        drag = log_law_drag_coefficient(z_b, self.bottom_roughness)
        # quadratic drag linearized with the old velocity magnitude
        return BoundaryCondition.drag(rho[0]*drag*abs(uv[0]))

    def solve(self, uv, dt, viscosity, rho, acceleration, wind_stress=0.0):
        """
        Advance velocity by one time step

        :arg uv: velocity array, updated in place over the active cells
        :arg float dt: time step
        :arg viscosity: effective dynamic viscosity
        :arg rho: suspension density
        :arg float acceleration: tidal surface slope acceleration
        :kwarg float wind_stress: surface stress (Pa)
        """
        n = self.mesh.n_active
        bnd_conditions = {
            'bottom': self.bottom_bc(uv, rho),
            'top': BoundaryCondition.flux(wind_stress),
        }
        return self.solve_system(uv, n, self.mesh.dz, dt, rho, viscosity,
                                 bnd_conditions,
                                 source=numpy.full(n, acceleration))
