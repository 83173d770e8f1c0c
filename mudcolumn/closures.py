r"""
Constitutive closures of the holistic mud model
===============================================

Algebraic relations that couple the momentum, sediment and turbulence
equations. All functions are stateless and operate on numpy arrays of the
active cells.

With sediment volume fraction :math:`\phi_s = c/\rho_s` the closures are

.. math::
    \rho &= \rho_w + (1 - \rho_w/\rho_s) c \\
    \tau_y &= a_y \phi_s^{n_y} \\
    \mu_{rh} &= \mu_0 e^{b \phi_s} + \tau_y/\dot\gamma \\
    k_f &= \min\left(c_1 \frac{g d^2}{\nu_0}
        \frac{(1-\phi_s)^3}{\phi_s^2}, k_{f,max}\right) \\
    w_s &= (1-\phi_s)\left(\frac{\rho_s}{\rho_w} - 1\right)\frac{g d^2}{\nu_0}
        \min\left(c_1\frac{(1-\phi_s)^3}{\phi_s}, \frac{1}{18(1 + c_2\phi_s)}\right) \\
    \sigma' &= A \phi_s^B \\
    K_{rh} &= (1-\phi_s) \frac{k_f}{\rho_w g} \sigma' \\
    K &= K_{rh} + \nu_t + l_e^2 \dot\gamma

The effective stress follows Merckelbach (2000), the permeability
Kozeny (1927) and Carman (1937), and the rheology is a Bingham fluid.

Settling velocities are returned as positive magnitudes; settling is always
directed towards the bed.
"""
from .utility import *


def shear_rate(dvdz, minval=1.0e-6):
    """
    Magnitude of the velocity shear, floored away from zero

    :arg dvdz: vertical gradient of velocity
    :kwarg float minval: minimum shear rate
    """
    return numpy.maximum(numpy.abs(dvdz), minval)


def suspension_density(c, rho_s, rho_w):
    """
    Density of the water-sediment mixture

    :arg c: sediment mass concentration (kg m-3)
    :arg float rho_s: sediment density
    :arg float rho_w: water density
    """
    phi = c/rho_s
    return phi*rho_s + (1.0 - phi)*rho_w


def volume_fraction(c, rho_s):
    """Sediment volume fraction"""
    return c/rho_s


def yield_stress(phi, coefficient=844000.0, exponent=4.0):
    """Bingham yield stress (Pa)"""
    return coefficient*phi**exponent


def bingham_viscosity(mu0, phi, tau_y, gamma_dot, rheology_exponent=20.0):
    """
    Rheological dynamic viscosity of the suspension (Pa s)

    :arg mu0: molecular dynamic viscosity
    :arg phi: sediment volume fraction
    :arg tau_y: yield stress
    :arg gamma_dot: shear rate, must be positive
    :kwarg float rheology_exponent: exponential amplification with volume fraction
    """
    return mu0*numpy.exp(rheology_exponent*phi) + tau_y/gamma_dot


def permeability(phi, d, c1, nu0, g, maxval=1.0e6, phi_min=1.0e-6):
    """
    Kozeny-Carman permeability (m s-1), capped at ``maxval``

    :arg phi: sediment volume fraction
    :arg float d: particle diameter
    :arg float c1: permeability coefficient
    :arg float nu0: kinematic viscosity of water
    :arg float g: gravitational acceleration
    :kwarg float maxval: permeability ceiling
    :kwarg float phi_min: volume fraction floor in the denominator
    """
    phi_pos = numpy.maximum(phi, phi_min)
    return numpy.minimum(c1*g*d**2/nu0*(1.0 - phi)**3/phi_pos**2, maxval)


def settling_velocity(phi, d, c1, c2, rho_s, rho_w, nu0, g, phi_min=1.0e-6):
    """
    Hindered settling velocity magnitude (m s-1)

    The more restrictive of the permeability limited and the hindered Stokes
    forms is used. The velocity vanishes as the volume fraction approaches 1.

    :arg phi: sediment volume fraction
    :arg float d: particle diameter
    :arg float c1: permeability coefficient
    :arg float c2: hindered settling coefficient
    :arg float rho_s: sediment density
    :arg float rho_w: water density
    :arg float nu0: kinematic viscosity of water
    :arg float g: gravitational acceleration
    :kwarg float phi_min: volume fraction floor in the denominator
    """
    stokes = (1.0 - phi)*(rho_s/rho_w - 1.0)*g/nu0*d**2
    limiter = numpy.minimum(c1*(1.0 - phi)**3/numpy.maximum(phi, phi_min),
                            1.0/18.0/(1.0 + c2*phi))
    return stokes*limiter


def effective_stress(phi, coefficient, exponent):
    """Merckelbach effective stress (Pa)"""
    return coefficient*phi**exponent


def consolidation_diffusivity(phi, k_f, sigma_eff, rho_w, g):
    """Consolidation diffusivity from permeability and effective stress (m2 s-1)"""
    return (1.0 - phi)*k_f/(rho_w*g)*sigma_eff


def holistic_diffusivity(k_rh, nu_t, gamma_dot, mixing_length):
    """Consolidation, turbulent and shear mixing diffusivity (m2 s-1)"""
    return k_rh + nu_t + mixing_length**2*numpy.abs(gamma_dot)


def evaluate_closures(uv, c, tke, omega, z_center, n, sediment_options,
                      rho_w=None, nu0=None, g=None):
    """
    Evaluate all closures over the active cells, in dependency order.

    :arg uv: velocity
    :arg c: sediment concentration
    :arg tke: turbulent kinetic energy
    :arg omega: specific dissipation rate
    :arg z_center: cell center coordinates
    :arg int n: number of active cells
    :arg sediment_options: :class:`.SedimentModelOptions` instance
    :kwarg rho_w, nu0, g: override values in :data:`physical_constants`
    :returns: :class:`.AttrDict` of closure fields of length ``n``
    """
    o = sediment_options
    rho_w = physical_constants['rho0'] if rho_w is None else rho_w
    nu0 = physical_constants['nu0'] if nu0 is None else nu0
    g = physical_constants['g_grav'] if g is None else g
    rho_s = o.sediment_density
    d = o.particle_diameter

    f = AttrDict()
    f.dvdz = vertical_gradient(uv, z_center, n)[:n]
    f.gamma_dot = shear_rate(f.dvdz, minval=o.shear_rate_min)
    c = c[:n]
    f.rho = suspension_density(c, rho_s, rho_w)
    f.drhodz = vertical_gradient(f.rho, z_center, n)
    f.nu_t = tke[:n]/omega[:n]
    f.mu_t = f.rho*f.nu_t
    f.mu0 = f.rho*nu0
    f.phi = volume_fraction(c, rho_s)
    f.tau_y = yield_stress(f.phi, o.yield_stress_coefficient, o.yield_stress_exponent)
    f.mu_rh = bingham_viscosity(f.mu0, f.phi, f.tau_y, f.gamma_dot,
                                rheology_exponent=o.rheology_exponent)
    f.k_f = permeability(f.phi, d, o.permeability_coefficient, nu0, g,
                         maxval=o.permeability_max, phi_min=o.volume_fraction_min)
    f.w_s = settling_velocity(f.phi, d, o.permeability_coefficient,
                              o.hindered_settling_coefficient, rho_s, rho_w, nu0, g,
                              phi_min=o.volume_fraction_min)
    f.sigma_eff = effective_stress(f.phi, o.effective_stress_coefficient,
                                   o.effective_stress_exponent)
    f.k_rh = consolidation_diffusivity(f.phi, f.k_f, f.sigma_eff, rho_w, g)
    f.diffusivity = holistic_diffusivity(f.k_rh, f.nu_t, f.gamma_dot,
                                         o.erosion_mixing_length)
    f.mu = f.mu_rh + f.mu_t
    return f
