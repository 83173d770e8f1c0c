r"""
Closed form M2/M4 tidal forcing of the water column

The surface elevation is the sum of the M2 constituent and its M4 overtide

.. math::
    \eta = A_2 \cos(\omega_2 t) + A_4 \cos(2\omega_2 t - \varphi_4)

and the depth averaged velocity is in phase with the elevation,
:math:`U = (U_2/A_2)\,\eta`, where :math:`U_2` is the M2 velocity amplitude.
If :math:`U_2` is not given the velocity is that of a progressive shallow
water wave, :math:`U = \sqrt{g/H}\,\eta` with mean depth :math:`H`. The column
is driven by the surface slope acceleration that balances the local
acceleration of :math:`U` and quadratic bed friction

.. math::
    a = \frac{\partial U}{\partial t} + C_D \frac{|U| U}{H + \eta}

and the friction velocity is :math:`u_* = \sqrt{C_D} |U|`.
"""
from .utility import *

#: period of the M2 constituent (s)
M2_PERIOD = 44714.16


def check_tidal_amplitudes(mean_depth, amplitude, m4_amplitude):
    """Raise :class:`.ModelConfigurationError` if low water falls dry"""
    if not mean_depth > amplitude + m4_amplitude:
        raise ModelConfigurationError(
            'Tidal amplitudes ({:} + {:} m) must be smaller than the mean depth {:} m'.format(
                amplitude, m4_amplitude, mean_depth))


def tidal_forcing_m2m4(t, mean_depth, amplitude, g_grav=None, m4_amplitude=0.0,
                       m4_phase=0.0, drag_coefficient=2.5e-3, velocity_amplitude=None):
    """
    Evaluate the tidal forcing at time ``t``

    :arg float t: elapsed simulation time (s)
    :arg float mean_depth: mean water depth (m)
    :arg float amplitude: M2 elevation amplitude (m)
    :kwarg float g_grav: gravitational acceleration
    :kwarg float m4_amplitude: M4 elevation amplitude (m)
    :kwarg float m4_phase: M4 phase lag (rad)
    :kwarg float drag_coefficient: quadratic drag coefficient
    :kwarg float velocity_amplitude: M2 depth averaged velocity amplitude (m/s).
        If None, the progressive wave velocity :math:`\\sqrt{g/H} A_2` is used.
    :returns: tuple ``(depth, acceleration, friction_velocity)``
    """
    if g_grav is None:
        g_grav = physical_constants['g_grav']
    check_tidal_amplitudes(mean_depth, amplitude, m4_amplitude)
    omega2 = 2*numpy.pi/M2_PERIOD
    omega4 = 2*omega2
    elev = amplitude*numpy.cos(omega2*t) + m4_amplitude*numpy.cos(omega4*t - m4_phase)
    delev_dt = -amplitude*omega2*numpy.sin(omega2*t) - m4_amplitude*omega4*numpy.sin(omega4*t - m4_phase)
    if velocity_amplitude is None:
        c = numpy.sqrt(g_grav/mean_depth)
    elif amplitude > 0.0:
        c = velocity_amplitude/amplitude
    else:
        c = 0.0
    depth = mean_depth + elev
    u = c*elev
    acc = c*delev_dt + drag_coefficient*abs(u)*u/depth
    ustar = numpy.sqrt(drag_coefficient)*abs(u)
    return depth, acc, ustar


class TidalForcingM2M4(object):
    """
    Callable tidal forcing, ``forcing(t) -> (depth, acceleration, friction_velocity)``
    """
    def __init__(self, mean_depth, amplitude, g_grav=None, m4_amplitude=0.0,
                 m4_phase=0.0, drag_coefficient=2.5e-3, velocity_amplitude=None):
        check_tidal_amplitudes(mean_depth, amplitude, m4_amplitude)
        self.mean_depth = mean_depth
        self.amplitude = amplitude
        self.g_grav = physical_constants['g_grav'] if g_grav is None else g_grav
        self.m4_amplitude = m4_amplitude
        self.m4_phase = m4_phase
        self.drag_coefficient = drag_coefficient
        self.velocity_amplitude = velocity_amplitude

    @classmethod
    def from_options(cls, options):
        """Create forcing from :class:`.TidalForcingOptions`"""
        return cls(options.mean_depth, options.m2_amplitude,
                   m4_amplitude=options.m4_amplitude,
                   m4_phase=options.m4_phase,
                   drag_coefficient=options.drag_coefficient,
                   velocity_amplitude=options.velocity_amplitude)

    def __call__(self, t):
        return tidal_forcing_m2m4(t, self.mean_depth, self.amplitude, self.g_grav,
                                  m4_amplitude=self.m4_amplitude,
                                  m4_phase=self.m4_phase,
                                  drag_coefficient=self.drag_coefficient,
                                  velocity_amplitude=self.velocity_amplitude)

    def __repr__(self):
        return 'TidalForcingM2M4(mean_depth={:}, amplitude={:}, m4_amplitude={:}, velocity_amplitude={:})'.format(
            self.mean_depth, self.amplitude, self.m4_amplitude, self.velocity_amplitude)
