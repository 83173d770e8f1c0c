"""
Tests the M2/M4 tidal forcing
"""
from mudcolumn import *
from mudcolumn.tidal_forcing import tidal_forcing_m2m4, TidalForcingM2M4, M2_PERIOD
from mudcolumn.options import TidalForcingOptions
import pytest


def test_depth_positive_over_cycle():
    forcing = TidalForcingM2M4(5.54, 1.46, m4_amplitude=0.2)
    t = numpy.linspace(0, 2*M2_PERIOD, 1001)
    depth = numpy.array([forcing(ti)[0] for ti in t])
    assert depth.min() > 0
    assert numpy.allclose(depth.max(), 5.54 + 1.46 + 0.2)
    assert depth.min() >= 5.54 - 1.46 - 0.2


def test_periodicity():
    forcing = TidalForcingM2M4(5.54, 1.46, m4_amplitude=0.2, m4_phase=0.3)
    a = forcing(1234.0)
    b = forcing(1234.0 + M2_PERIOD)
    assert numpy.allclose(a, b)


def test_friction_velocity():
    depth, acc, ustar = tidal_forcing_m2m4(0.0, 5.0, 1.0, g_grav=9.81,
                                           drag_coefficient=2.5e-3)
    u = numpy.sqrt(9.81/5.0)*1.0
    assert numpy.allclose(depth, 6.0)
    assert numpy.allclose(ustar, numpy.sqrt(2.5e-3)*u)
    # high water: no local acceleration, friction only
    assert numpy.allclose(acc, 2.5e-3*u*u/6.0)


def test_friction_velocity_given_velocity_amplitude():
    depth, acc, ustar = tidal_forcing_m2m4(0.0, 5.0, 1.0, m4_amplitude=0.25,
                                           drag_coefficient=2.5e-3,
                                           velocity_amplitude=0.8)
    u = 0.8*1.25
    assert numpy.allclose(depth, 6.25)
    assert numpy.allclose(ustar, numpy.sqrt(2.5e-3)*u)
    assert numpy.allclose(acc, 2.5e-3*u*u/6.25)


def test_acceleration_matches_velocity_tendency():
    forcing = TidalForcingM2M4(5.54, 1.46, drag_coefficient=1e-12,
                               velocity_amplitude=1.0)
    t = 3000.0
    dt = 1.0e-2
    c = 1.0/1.46
    u_p = c*(forcing(t + dt)[0] - 5.54)
    u_m = c*(forcing(t - dt)[0] - 5.54)
    assert numpy.allclose(forcing(t)[1], (u_p - u_m)/(2*dt), rtol=1e-5)


def test_default_velocity_range():
    """Default forcing peaks between 1 and 1.5 m/s depth averaged flow"""
    forcing = TidalForcingM2M4.from_options(TidalForcingOptions())
    drag = forcing.drag_coefficient
    t = numpy.linspace(0, M2_PERIOD, 2001)
    ustar = numpy.array([forcing(ti)[2] for ti in t])
    u = ustar/numpy.sqrt(drag)
    assert numpy.allclose(u.max(), (1.46 + 0.2)/1.46, rtol=1e-4)
    assert 1.0 < u.max() < 1.5
    # progressive wave velocity would be twice as large
    wave = TidalForcingM2M4(5.54, 1.46, m4_amplitude=0.2, velocity_amplitude=None)
    assert wave(0.0)[2] > 1.9*forcing(0.0)[2]


def test_no_tide_is_at_rest():
    depth, acc, ustar = tidal_forcing_m2m4(500.0, 4.0, 0.0)
    assert depth == 4.0
    assert acc == 0.0
    assert ustar == 0.0


@pytest.mark.parametrize(('amplitude', 'm4_amplitude'), [(5.54, 0.0), (5.0, 0.6)])
def test_amplitude_exceeding_depth_raises(amplitude, m4_amplitude):
    with pytest.raises(ModelConfigurationError):
        TidalForcingM2M4(5.54, amplitude, m4_amplitude=m4_amplitude)
    with pytest.raises(ModelConfigurationError):
        tidal_forcing_m2m4(0.0, 5.54, amplitude, m4_amplitude=m4_amplitude)


def test_from_options():
    options = TidalForcingOptions()
    options.m2_amplitude = 1.0
    forcing = TidalForcingM2M4.from_options(options)
    assert forcing.mean_depth == 5.54
    assert forcing.amplitude == 1.0
    assert forcing.m4_amplitude == 0.2
    assert forcing.velocity_amplitude == 1.0


def test_zero_m2_amplitude_with_velocity_amplitude():
    depth, acc, ustar = tidal_forcing_m2m4(100.0, 4.0, 0.0, m4_amplitude=0.3,
                                           velocity_amplitude=1.0)
    assert acc == 0.0
    assert ustar == 0.0
