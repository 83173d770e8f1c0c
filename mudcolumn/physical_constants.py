"""
Default values for physical constants and parameters
"""

physical_constants = {
    'g_grav': 9.81,        # gravitational acceleration
    'rho0': 1000.0,        # reference water density
    'nu0': 1.0e-6,         # kinematic viscosity of water (m2/s)
    'von_karman': 0.4,     # von Karman constant for bottom log layer
}
