r"""
k-omega turbulence closure for sediment laden flow
===================================================

This model solves two dynamic equations, for turbulent kinetic energy
(TKE, :math:`k`) and for the specific dissipation rate :math:`\omega` [1]:

.. math::
    \rho\frac{\partial k}{\partial t}
        = \frac{\partial}{\partial z}\left(\mu_k \frac{\partial k}{\partial z}\right)
        + \rho\left(P_k + G^+\right) - \rho\left(\beta^* \omega - \frac{G^-}{k}\right) k
    :label: turb_tke_eq

.. math::
    \rho\frac{\partial \omega}{\partial t}
        = \frac{\partial}{\partial z}\left(\mu_\omega \frac{\partial \omega}{\partial z}\right)
        + \rho \alpha \dot\gamma^2 - \rho \beta \omega^2
    :label: turb_omega_eq

with the shear production :math:`P_k = \nu_t \dot\gamma^2`,
:math:`\nu_t = k/\omega` and the diffusivities

.. math::
    \mu_k = \mu_\omega = \mu_{rh} + \sigma_k \rho \nu_t

The buoyancy term follows Chmiel et al. [2]. With

.. math::
    G = \frac{g}{Sc\,\rho}\frac{\partial \rho}{\partial z}\frac{k}{\omega}

a negative density gradient (stable stratification) contributes to the sink
term :math:`G^-/k` and damps turbulence, whereas a non-negative gradient
enters the source :math:`G^+`. The split is decided cell by cell.

To ensure positivity Patankar-type time discretization is used: sources are
explicit, sinks are implicit in the prognostic variable.

Boundary conditions: :math:`k = k_B` at the bed and zero flux at the
surface; :math:`\omega = \omega_B = 2500\nu_0/k_s^2` at the bed and
:math:`\omega = \omega_S` at the surface.

[1] Wilcox, D. C. (1988). Reassessment of the scale-determining equation for
    advanced turbulence models. AIAA Journal, 26(11):1299-1310.
    http://dx.doi.org/10.2514/3.10041

[2] Chmiel, O., Baselt, I. and Malcherek, A. (2020). Holistic modelling of
    fluid mud: turbulence damping by sediment induced stratification.
"""
from .utility import *
from .equation import VerticalEquation, BoundaryCondition
from .options import KOmegaModelOptions
from abc import ABC, abstractmethod


def buoyancy_terms(drhodz, rho, tke, omega, n, schmidt_nb=1.0, g=None):
    r"""
    Split buoyancy flux into TKE production and TKE normalized destruction.

    For each cell, if :math:`\partial\rho/\partial z < 0` the term
    :math:`g/(Sc\,\rho)\,\partial_z\rho/\omega` is stored in the destruction
    array (normalized by TKE) and the production is zero; otherwise
    :math:`g/(Sc\,\rho)\,\partial_z\rho\,k/\omega` is stored in the
    production array.

    :arg drhodz: vertical density gradient
    :arg rho: suspension density
    :arg tke: turbulent kinetic energy
    :arg omega: specific dissipation rate
    :arg int n: number of active cells
    :kwarg float schmidt_nb: turbulent Schmidt number
    :kwarg float g: gravitational acceleration
    :returns: tuple ``(g_tke, g_tke_by_tke)``
    """
    if g is None:
        g = physical_constants['g_grav']
    g_tke = numpy.zeros(n)
    g_tke_by_tke = numpy.zeros(n)
    for i in range(n):
        if drhodz[i] < 0:
            g_tke_by_tke[i] = g/schmidt_nb/rho[i]*drhodz[i]/omega[i]
            g_tke[i] = 0.0
        else:
            g_tke_by_tke[i] = 0.0
            g_tke[i] = g/schmidt_nb/rho[i]*drhodz[i]*tke[i]/omega[i]
    return g_tke, g_tke_by_tke


class TurbulenceModel(ABC):
    """Base class for all vertical turbulence models"""

    @abstractmethod
    def initialize(self):
        """Initialize all turbulence fields"""
        pass

    @abstractmethod
    def preprocess(self, closure_fields):
        """
        Computes all diagnostic variables that depend on the mean flow model
        variables.

        To be called before updating the turbulence PDEs.
        """
        pass

    @abstractmethod
    def postprocess(self):
        """
        Updates all diagnostic variables that depend on the turbulence state
        variables.

        To be called after updating the turbulence PDEs.
        """
        pass


class KOmegaModel(TurbulenceModel):
    """
    k-omega turbulence closure with buoyancy damping by suspended sediment
    """
    def __init__(self, mesh, k_field, omega_field, options=None, theta=1.0,
                 bottom_tke=0.0, bottom_omega=None, surface_omega=0.1,
                 bottom_roughness=3.2e-3):
        """
        :arg mesh: :class:`.VerticalMesh` object
        :arg k_field: turbulent kinetic energy (TKE) array
        :arg omega_field: specific dissipation rate array
        :kwarg options: :class:`.KOmegaModelOptions` instance
        :kwarg float theta: implicitness parameter
        :kwarg float bottom_tke: TKE at the bed
        :kwarg bottom_omega: omega at the bed. If None, the rough wall value
            :math:`2500 \\nu_0/k_s^2` is used
        :kwarg float surface_omega: omega at the free surface
        :kwarg float bottom_roughness: Nikuradse roughness :math:`k_s`
        """
        self.mesh = mesh
        self.k = k_field
        self.omega = omega_field
        self.options = options if options is not None else KOmegaModelOptions()
        self.bottom_tke = bottom_tke
        if bottom_omega is None:
            bottom_omega = 2500.0*physical_constants['nu0']/bottom_roughness**2
        self.bottom_omega = bottom_omega
        self.surface_omega = surface_omega
        self.tke_eq = TKEEquation(mesh, theta=theta)
        self.omega_eq = OmegaEquation(mesh, theta=theta)
        self.terms = AttrDict()
        self._initialized = False

    def initialize(self, k_init=None, omega_init=None):
        """
        Initialize turbulent fields.

        :kwarg k_init: initial TKE, defaults to ``options.k_init``
        :kwarg omega_init: initial omega, defaults to ``options.omega_init``
        """
        o = self.options
        self.k[:] = o.k_init if k_init is None else k_init
        self.omega[:] = o.omega_init if omega_init is None else omega_init
        self._initialized = True

    def preprocess(self, closure_fields):
        """
        Compute production, destruction and diffusivity of both equations.

        Uses the closure fields of the current (not yet updated) mean flow.

        :arg closure_fields: :class:`.AttrDict` returned by
            :func:`.evaluate_closures`
        """
        if not self._initialized:
            self.initialize()
        o = self.options
        f = closure_fields
        n = self.mesh.n_active
        k = self.k[:n]
        omega = self.omega[:n]
        t = self.terms
        t.g_tke, t.g_tke_by_tke = buoyancy_terms(f.drhodz, f.rho, k, omega, n,
                                                 schmidt_nb=o.schmidt_nb_buoyancy)
        t.mu_k = f.mu_rh + o.schmidt_nb_tke*f.mu_t
        t.mu_omega = f.mu_rh + o.schmidt_nb_tke*f.mu_t
        t.p_k = k/omega*f.gamma_dot**2
        t.eps_by_k = o.beta_star*omega
        t.p_omega = o.alpha*f.gamma_dot**2
        t.eps_omega_by_omega = o.beta*omega
        t.rho = f.rho

    def solve(self, dt):
        """Advance TKE and omega by one time step, TKE first"""
        t = self.terms
        self.tke_eq.solve(self.k, dt, t.mu_k, t.rho, t.p_k + t.g_tke,
                          t.eps_by_k - t.g_tke_by_tke, self.bottom_tke)
        self.omega_eq.solve(self.omega, dt, t.mu_omega, t.rho, t.p_omega,
                            t.eps_omega_by_omega, self.bottom_omega,
                            self.surface_omega)

    def postprocess(self):
        """Impose minimum values on TKE and omega"""
        n = self.mesh.n_active
        set_func_min_val(self.k[:n], self.options.k_min)
        set_func_min_val(self.omega[:n], self.options.omega_min)

    @property
    def eddy_viscosity(self):
        """Turbulent kinematic viscosity of the active cells"""
        n = self.mesh.n_active
        return self.k[:n]/self.omega[:n]

    def print_debug(self):
        """
        Print diagnostic field values for debugging.
        """
        n = self.mesh.n_active
        fmt = '{:8s} {:10.3e} {:10.3e}'
        print_output(' -----')
        print_output(fmt.format('k', self.k[:n].min(), self.k[:n].max()))
        print_output(fmt.format('omega', self.omega[:n].min(), self.omega[:n].max()))
        nu_t = self.eddy_viscosity
        print_output(fmt.format('nu_t', nu_t.min(), nu_t.max()))
        if 'g_tke' in self.terms:
            print_output(fmt.format('G+', self.terms.g_tke.min(), self.terms.g_tke.max()))
            print_output(fmt.format('G-/k', self.terms.g_tke_by_tke.min(), self.terms.g_tke_by_tke.max()))


class TKEEquation(VerticalEquation):
    """
    Turbulent kinetic energy equation :eq:`turb_tke_eq`
    """
    name = 'tke_1d'

    def solve(self, k, dt, diffusivity, rho, production, destruction, bottom_value):
        """
        :arg k: TKE array, updated in place over the active cells
        :arg float dt: time step
        :arg diffusivity: TKE diffusivity :math:`\\mu_k`
        :arg rho: suspension density
        :arg production: explicit source
        :arg destruction: implicit sink rate
        :arg float bottom_value: TKE at the bed
        """
        n = self.mesh.n_active
        bnd_conditions = {
            'bottom': BoundaryCondition.value(bottom_value),
            'top': BoundaryCondition.flux(0.0),
        }
        return self.solve_system(k, n, self.mesh.dz, dt, rho, diffusivity,
                                 bnd_conditions, source=production,
                                 sink=destruction)


class OmegaEquation(VerticalEquation):
    """
    Specific dissipation rate equation :eq:`turb_omega_eq`
    """
    name = 'omega_1d'

    def solve(self, omega, dt, diffusivity, rho, production, destruction,
              bottom_value, surface_value):
        """
        :arg omega: omega array, updated in place over the active cells
        :arg float dt: time step
        :arg diffusivity: omega diffusivity :math:`\\mu_\\omega`
        :arg rho: suspension density
        :arg production: explicit source
        :arg destruction: implicit sink rate
        :arg float bottom_value: omega at the bed
        :arg float surface_value: omega at the surface
        """
        n = self.mesh.n_active
        bnd_conditions = {
            'bottom': BoundaryCondition.value(bottom_value),
            'top': BoundaryCondition.value(surface_value),
        }
        return self.solve_system(omega, n, self.mesh.dz, dt, rho, diffusivity,
                                 bnd_conditions, source=production,
                                 sink=destruction)
