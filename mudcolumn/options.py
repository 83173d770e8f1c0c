"""
Options of the 1DV mud column model

All options are type-checked and they are stored in traitlets Configurable
objects.
"""
from .configuration import *


class KOmegaModelOptions(FrozenHasTraits):
    """Options for the k-omega turbulence model"""
    name = 'k-omega turbulence closure model'
    schmidt_nb_tke = PositiveFloat(
        0.5, help="""float: turbulent kinetic energy Schmidt number :math:`\\sigma_k`

        Also used in the diffusivity of the omega equation.""").tag(config=True)
    alpha = PositiveFloat(5.0/9.0,
                          help='float: production coefficient of the omega equation').tag(config=True)
    beta = PositiveFloat(3.0/40.0,
                         help='float: destruction coefficient of the omega equation').tag(config=True)
    beta_star = PositiveFloat(0.09,
                              help='float: destruction coefficient of the TKE equation').tag(config=True)
    schmidt_nb_buoyancy = PositiveFloat(
        1.0, help='float: turbulent Schmidt number in the buoyancy term').tag(config=True)
    k_init = PositiveFloat(1.0e-5,
                           help='float: initial turbulent kinetic energy').tag(config=True)
    omega_init = PositiveFloat(1.0e-5,
                               help='float: initial specific dissipation rate').tag(config=True)
    k_min = PositiveFloat(1.0e-12,
                          help='float: minimum value for turbulent kinetic energy').tag(config=True)
    omega_min = PositiveFloat(1.0e-12,
                              help='float: minimum value for omega').tag(config=True)


class SedimentModelOptions(FrozenHasTraits):
    """Options of the holistic cohesive sediment model"""
    name = 'Sediment model'
    sediment_density = PositiveFloat(
        2650.0, help='float: density of the solid sediment particles (kg m-3)').tag(config=True)
    particle_diameter = PositiveFloat(
        20.0e-6, help='float: sediment particle (floc) diameter (m)').tag(config=True)
    permeability_coefficient = PositiveFloat(
        0.005, help='float: Kozeny-Carman permeability coefficient :math:`c_1`').tag(config=True)
    hindered_settling_coefficient = NonNegativeFloat(
        180.0, help='float: hindered settling coefficient :math:`c_2`').tag(config=True)
    effective_stress_coefficient = NonNegativeFloat(
        4.0e8, help='float: Merckelbach effective stress coefficient :math:`A` (Pa)').tag(config=True)
    effective_stress_exponent = PositiveFloat(
        7.5, help='float: Merckelbach effective stress exponent :math:`B`').tag(config=True)
    erosion_mixing_length = NonNegativeFloat(
        6.7e-3, help='float: mixing length of shear induced diffusion (m)').tag(config=True)
    yield_stress_coefficient = NonNegativeFloat(
        844000.0, help='float: Bingham yield stress coefficient (Pa)').tag(config=True)
    yield_stress_exponent = PositiveFloat(
        4.0, help='float: Bingham yield stress exponent').tag(config=True)
    rheology_exponent = NonNegativeFloat(
        20.0, help='float: exponential viscosity amplification with volume fraction').tag(config=True)
    permeability_max = PositiveFloat(
        1.0e6, help='float: upper limit of the permeability (m s-1)').tag(config=True)
    shear_rate_min = PositiveFloat(
        1.0e-6, help='float: minimum shear rate in the Bingham viscosity (s-1)').tag(config=True)
    volume_fraction_min = PositiveFloat(
        1.0e-6, help="""float: volume fraction floor

        Used in denominators of the permeability and settling velocity.""").tag(config=True)


class TidalForcingOptions(FrozenHasTraits):
    """Options of the M2/M4 tidal forcing"""
    name = 'Tidal forcing'
    mean_depth = PositiveFloat(5.54, help='float: mean water depth (m)').tag(config=True)
    m2_amplitude = NonNegativeFloat(1.46, help='float: M2 elevation amplitude (m)').tag(config=True)
    m4_amplitude = NonNegativeFloat(0.2, help='float: M4 elevation amplitude (m)').tag(config=True)
    m4_phase = Float(0.0, help='float: M4 phase lag relative to M2 (rad)').tag(config=True)
    drag_coefficient = PositiveFloat(
        2.5e-3, help='float: quadratic drag coefficient of the depth averaged flow').tag(config=True)
    velocity_amplitude = NonNegativeFloat(
        1.0, allow_none=True, help="""float: M2 amplitude of the depth averaged velocity (m/s)

        The M4 overtide has the same velocity to elevation ratio. If None, the
        velocity of a progressive shallow water wave is used.""").tag(config=True)


class ModelOptions(FrozenConfigurable):
    """Options of the 1DV mud column model"""
    name = 'Model options'
    turbulence_model_options = Instance(KOmegaModelOptions, args=()).tag(config=True)
    sediment_model_options = Instance(SedimentModelOptions, args=()).tag(config=True)
    tidal_forcing_options = Instance(TidalForcingOptions, args=()).tag(config=True)

    z_bottom = Float(0.0, help='float: elevation of the bed (m)').tag(config=True)
    z_top = Float(
        7.1, help="""float: top of the vertical grid (m)

        Together with :attr:`n_max_layers` defines the nominal layer thickness.""").tag(config=True)
    n_max_layers = PositiveInteger(30, help='int: maximum number of vertical layers').tag(config=True)
    top_layer_min_fraction = BoundedFloat(
        0.5, bounds=[0.0, 1.0], help="""float: minimum relative thickness of the top layer

        A remainder thinner than this fraction of the nominal thickness is merged
        into the layer below.""").tag(config=True)
    timestep = PositiveFloat(10.0, help='float: time step (s)').tag(config=True)
    n_timesteps = PositiveInteger(30000, help='int: number of time steps').tag(config=True)
    implicitness_theta = BoundedFloat(
        1.0, bounds=[0.0, 1.0], help="""float: implicitness parameter theta

        Value 0.5 implies Crank-Nicolson scheme, 1.0 implies fully implicit formulation.""").tag(config=True)
    history_export_interval = PositiveInteger(
        10, help='int: number of time steps between history samples').tag(config=True)
    simulation_export_interval = PositiveInteger(
        2000, help="""int: number of time steps between exports

        The model state is printed and diagnostic callbacks are evaluated.""").tag(config=True)
    simulation_initial_date = DatetimeWithTimezone(
        None, allow_none=True, help='datetime: calendar date of the initial state').tag(config=True)

    bottom_boundary_condition = Enum(
        ['no-slip', 'log-law'], default_value='no-slip',
        help="""str: bottom boundary condition of the momentum equation

        'log-law' applies quadratic drag derived from :attr:`bottom_roughness`.""").tag(config=True)
    bottom_roughness = PositiveFloat(
        3.2e-3, help='float: Nikuradse bed roughness :math:`k_s` (m)').tag(config=True)
    bottom_tke = NonNegativeFloat(0.0, help='float: turbulent kinetic energy at the bed').tag(config=True)
    bottom_omega = PositiveFloat(
        None, allow_none=True, help="""float: specific dissipation rate at the bed

        If None, the rough wall value :math:`2500 \\nu_0/k_s^2` is used.""").tag(config=True)
    surface_omega = PositiveFloat(0.1, help='float: specific dissipation rate at the surface').tag(config=True)
    wind_stress = Float(0.0, help='float: kinematic surface stress times density (Pa)').tag(config=True)

    output_directory = Unicode(
        'outputs', help='str: directory where model output files are stored').tag(config=True)
    no_exports = Bool(
        False, help="""bool: do not store any outputs to disk

        Disables history and HDF5 diagnostic outputs. Used in the test suite.""").tag(config=True)
    export_diagnostics = Bool(
        True, help='bool: store diagnostic variables to disk in HDF5 format').tag(config=True)
    fields_to_export_hdf5 = List(
        trait=Unicode(), default_value=[],
        help='list: column fields whose vertical profiles are stored at every export').tag(config=True)
    check_sediment_conservation = Bool(
        False, help="""bool: compute the sediment mass at every export

        Prints deviation from the initial mass.""").tag(config=True)
    check_sediment_overshoot = Bool(
        False, help="""bool: compute the range of the sediment concentration at every export

        Prints overshoots beyond the initial values.""").tag(config=True)
    log_output = Bool(
        True, help='bool: redirect all output to log file in output directory').tag(config=True)
