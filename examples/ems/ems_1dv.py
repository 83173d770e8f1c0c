"""
Tidal mud column in the Ems river
=================================

Simulates the vertical structure of velocity, suspended sediment and
turbulence at a station in the tidal Ems river, starting on
2014-11-19 16:10 CET.

The water column is forced by an M2 tide with a weak M4 overtide. The mean
depth is 5.54 m and the mesh has at most 30 layers, so the number of active
layers follows the tide. The column starts with a uniform concentration of
28 kg m-3. During slack water the suspension settles and consolidates near
the bed, while peak flows mix it up again.

The history of velocity magnitude, concentration, turbulent kinetic energy
and shear rate is stored in ``outputs_ems/history.hdf5``.
"""
from mudcolumn import *
from mudcolumn.timezone import timezone_cet

outputdir = 'outputs_ems'
n_timesteps = 30000
if os.getenv('MUDCOLUMN_REGRESSION_TEST') is not None:
    n_timesteps = 200

init_date = datetime.datetime(2014, 11, 19, 16, 10, tzinfo=timezone_cet)

options = ModelOptions()
options.z_top = 7.1
options.n_max_layers = 30
options.timestep = 10.0
options.n_timesteps = n_timesteps
options.simulation_initial_date = init_date
options.history_export_interval = 10
options.simulation_export_interval = 500
options.output_directory = outputdir
options.check_sediment_conservation = True
options.check_sediment_overshoot = True
options.fields_to_export_hdf5 = ['uv_1d', 'sediment_1d', 'tke_1d', 'eddy_visc_1d']
options.tidal_forcing_options.mean_depth = 5.54
options.tidal_forcing_options.m2_amplitude = 1.46
options.tidal_forcing_options.velocity_amplitude = 1.0

solver_obj = solver.FlowSolver1DV(options)

solver_obj.assign_initial_conditions(sediment=28.0)
history = solver_obj.iterate()

# bed concentration on the last simulated day
if len(history) > 0:
    last = history.dates[-1]
    day = history.window(t_start=last - datetime.timedelta(days=1))
    c_bed = day.sediment[0, :]
    print_output('Bed concentration over the last day: {:.2f} - {:.2f} kg m-3'.format(
        numpy.nanmin(c_bed), numpy.nanmax(c_bed)))
    print_output('Active layers: {:} - {:}'.format(history.n_active.min(),
                                                   history.n_active.max()))
