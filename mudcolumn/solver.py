"""
Module for the 1DV mud column solver
"""
from .utility import *
from . import callback
from .options import ModelOptions
from .vertical_mesh import VerticalMesh, GridChangeRemapper
from .closures import evaluate_closures
from .momentum_eq import MomentumEquation
from .sediment_eq import SedimentEquation
from .turbulence import KOmegaModel
from .tidal_forcing import TidalForcingM2M4
from .exporter import ColumnHistory
from .timezone import simulation_time_to_datetime
import time as time_mod


class FlowSolver1DV(FrozenClass):
    """
    Main object for the one dimensional vertical (1DV) mud column model

    Couples the momentum, sediment, TKE and omega equations on a moving
    boundary vertical mesh that follows the tidal water depth.

    .. code-block:: python

        solver_obj = FlowSolver1DV()
        options = solver_obj.options
        options.timestep = 10.0
        options.n_timesteps = 30000
        solver_obj.assign_initial_conditions(sediment=28.0)
        solver_obj.iterate()
        solver_obj.history.sediment

    The time step sequence is: evaluate the tidal forcing, update the mesh,
    initialize new cells and remap the concentration, evaluate the closures
    and finally solve velocity, concentration, TKE and omega in this order.
    All closure terms are computed from the state at the beginning of the
    time step.
    """
    def __init__(self, options=None, forcing=None):
        """
        :kwarg options: :class:`.ModelOptions` instance, default options are
            used if None
        :kwarg forcing: callable ``forcing(t) -> (depth, acceleration,
            friction_velocity)``. If None, :class:`.TidalForcingM2M4` is
            created from ``options.tidal_forcing_options``.
        """
        self._initialized = False

        self.options = options if options is not None else ModelOptions()
        """Dictionary of all options. A :class:`.ModelOptions` object."""

        o = self.options
        self.mesh = VerticalMesh(o.z_bottom, o.z_top, o.n_max_layers,
                                 min_fraction=o.top_layer_min_fraction)
        self.forcing = forcing
        self.forcing_values = AttrDict(depth=None, acceleration=0.0, friction_velocity=0.0)

        self.fields = FieldDict()
        """Holds all column fields, each an array of length ``n_max_layers``"""
        for name in field_metadata:
            if name.endswith('_1d'):
                self.fields[name] = numpy.zeros(o.n_max_layers)
        self.closure_fields = None

        self.remapper = GridChangeRemapper(self.mesh)
        self.eq_momentum = None
        self.eq_sediment = None
        self.turbulence_model = None

        self.callbacks = callback.CallbackManager()
        """
        :class:`.CallbackManager` object that stores all callbacks
        """
        self.history = ColumnHistory(o.n_max_layers,
                                     initial_date=o.simulation_initial_date)
        """:class:`.ColumnHistory` of time-decimated samples"""

        self.dt = o.timestep
        self.iteration = 0
        self.i_export = 0
        self.simulation_time = 0.0
        self._isfrozen = True

    @unfrozen
    def create_equations(self):
        """
        Creates the forcing, the equations and the turbulence model
        """
        o = self.options
        if self.forcing is None:
            self.forcing = TidalForcingM2M4.from_options(o.tidal_forcing_options)
        theta = o.implicitness_theta
        self.eq_momentum = MomentumEquation(
            self.mesh, theta=theta,
            bottom_boundary_condition=o.bottom_boundary_condition,
            bottom_roughness=o.bottom_roughness)
        self.eq_sediment = SedimentEquation(self.mesh, theta=theta)
        self.turbulence_model = KOmegaModel(
            self.mesh, self.fields.tke_1d, self.fields.omega_1d,
            options=o.turbulence_model_options, theta=theta,
            bottom_tke=o.bottom_tke, bottom_omega=o.bottom_omega,
            surface_omega=o.surface_omega, bottom_roughness=o.bottom_roughness)

    def initialize(self):
        """
        Creates all objects and the mesh of the initial water depth
        """
        if self.eq_momentum is None:
            self.create_equations()
        self.dt = self.options.timestep
        self.history.initial_date = self.options.simulation_initial_date
        self._update_mesh(self.simulation_time)
        self.remapper.initialize()
        self.turbulence_model.initialize()
        self._initialized = True

    def _assign_field(self, fieldname, value):
        field = self.fields[fieldname]
        try:
            field[:] = numpy.broadcast_to(numpy.asarray(value, dtype=float), field.shape)
        except ValueError as e:
            raise ModelConfigurationError(
                'Initial condition of "{:}" must be a scalar or have {:} values'.format(
                    fieldname, field.size)) from e

    def assign_initial_conditions(self, uv=None, sediment=None, tke=None, omega=None):
        """
        Assigns initial conditions

        Values are scalars or arrays of length ``n_max_layers``.

        :kwarg uv: Initial condition for velocity
        :kwarg sediment: Initial condition for sediment concentration
        :kwarg tke: Initial condition for turbulent kinetic energy, defaults to
            ``k_init`` of the turbulence model options
        :kwarg omega: Initial condition for the specific dissipation rate,
            defaults to ``omega_init`` of the turbulence model options
        """
        if not self._initialized:
            self.initialize()
        if uv is not None:
            self._assign_field('uv_1d', uv)
        if sediment is not None:
            self._assign_field('sediment_1d', sediment)
            c = self.fields.sediment_1d
            rho_s = self.options.sediment_model_options.sediment_density
            if c.min() < 0.0 or c.max() > rho_s:
                raise ModelConfigurationError(
                    'Initial sediment concentration must be in [0, {:}]'.format(rho_s))
        if tke is not None:
            self._assign_field('tke_1d', tke)
        if omega is not None:
            self._assign_field('omega_1d', omega)
        for name in ['tke_1d', 'omega_1d']:
            if not self.fields[name].min() > 0.0:
                raise ModelConfigurationError('Initial {:} must be positive'.format(name))

    def add_callback(self, callback, eval_interval='export'):
        """
        Adds callback to solver object

        :arg callback: :class:`.DiagnosticCallback` instance
        :kwarg str eval_interval: Determines when callback will be evaluated,
            either 'export' or 'timestep' for evaluating after each export or
            time step.
        """
        self.callbacks.add(callback, eval_interval)

    def _update_mesh(self, t):
        depth, acc, ustar = self.forcing(t)
        if not (numpy.isfinite(depth) and depth > 0.0):
            msg = 'Step {:}: tidal forcing returned non-positive water depth {:}'.format(
                self.iteration, depth)
            error(msg)
            raise ModelConfigurationError(msg)
        self.forcing_values.depth = depth
        self.forcing_values.acceleration = acc
        self.forcing_values.friction_velocity = ustar
        self.mesh.update(depth)

    def _copy_down_new_cells(self):
        """Initialize cells that became active from the old top cell"""
        n = self.mesh.n_active
        n_old = self.mesh.n_active_old
        if n <= n_old:
            return
        for name in ['uv_1d', 'sediment_1d', 'tke_1d', 'omega_1d']:
            f = self.fields[name]
            f[n_old:n] = f[n_old - 1]

    def _check_field(self, fieldname, values):
        if not numpy.all(numpy.isfinite(values)):
            ix = int(numpy.argmin(numpy.isfinite(values)))
            err = NumericalInstabilityError(self.iteration, fieldname, values[ix],
                                            reason='non-finite value')
            error(str(err))
            raise err

    def _check_sediment(self):
        n = self.mesh.n_active
        c = self.fields.sediment_1d[:n]
        rho_s = self.options.sediment_model_options.sediment_density
        tolerance = 1.0e-10*max(1.0, c.max())
        if c.min() < -tolerance:
            err = NumericalInstabilityError(self.iteration, 'sediment_1d', c.min(),
                                            reason='negative concentration')
            error(str(err))
            raise err
        if c.max() > rho_s:
            err = NumericalInstabilityError(self.iteration, 'sediment_1d', c.max(),
                                            reason='concentration exceeds sediment density')
            error(str(err))
            raise err
        # round-off below zero
        set_func_min_val(c, 0.0)

    def _store_diagnostics(self, f):
        n = self.mesh.n_active
        fields = self.fields
        fields.z_coord_1d[:] = self.mesh.z_center
        fields.dz_1d[:] = self.mesh.dz
        fields.density_1d[:n] = f.rho
        fields.density_grad_1d[:n] = f.drhodz
        fields.shear_freq_1d[:n] = f.gamma_dot
        fields.eddy_visc_1d[:n] = f.nu_t
        fields.eff_visc_1d[:n] = f.mu
        fields.diffusivity_1d[:n] = f.diffusivity
        fields.settling_velocity_1d[:n] = f.w_s
        terms = self.turbulence_model.terms
        fields.buoy_flux_1d[:n] = terms.g_tke - terms.g_tke_by_tke*fields.tke_1d[:n]

    def advance(self):
        """
        Advances the model by one time step
        """
        if not self._initialized:
            self.initialize()
        fields = self.fields
        self._update_mesh(self.simulation_time)
        if self.iteration > 0:
            self._copy_down_new_cells()
            self.remapper.remap(fields.sediment_1d)
        n = self.mesh.n_active

        f = evaluate_closures(fields.uv_1d, fields.sediment_1d, fields.tke_1d,
                              fields.omega_1d, self.mesh.z_center, n,
                              self.options.sediment_model_options)
        for name in ['mu', 'diffusivity', 'w_s']:
            self._check_field(name, f[name])
        self.closure_fields = f
        self.turbulence_model.preprocess(f)
        self._store_diagnostics(f)

        for eq in [self.eq_momentum, self.eq_sediment,
                   self.turbulence_model.tke_eq, self.turbulence_model.omega_eq]:
            eq.iteration = self.iteration
        self.eq_momentum.solve(fields.uv_1d, self.dt, f.mu, f.rho,
                               self.forcing_values.acceleration,
                               wind_stress=self.options.wind_stress)
        self.eq_sediment.solve(fields.sediment_1d, self.dt, f.diffusivity, f.w_s)
        self.turbulence_model.solve(self.dt)
        self.turbulence_model.postprocess()

        for name in ['uv_1d', 'sediment_1d', 'tke_1d', 'omega_1d']:
            self._check_field(name, fields[name][:n])
        self._check_sediment()

        self.iteration += 1
        self.simulation_time = self.iteration*self.dt

    def record_history(self):
        """
        Appends the current state to :attr:`history`

        The shear magnitude is the velocity gradient the closures of the last
        step were evaluated with.
        """
        n = self.mesh.n_active
        fields = self.fields
        if self.closure_fields is not None:
            shear = numpy.abs(self.closure_fields.dvdz)
        else:
            shear = numpy.abs(vertical_gradient(fields.uv_1d, self.mesh.z_center, n))
        self.history.record(self.simulation_time, self.mesh,
                            uv_magnitude=numpy.abs(fields.uv_1d),
                            sediment=fields.sediment_1d,
                            tke=fields.tke_1d,
                            shear_magnitude=shear)

    def sediment_mass(self):
        """Column integrated sediment mass (kg m-2)"""
        return comp_column_mass(self.fields.sediment_1d, self.mesh.dz,
                                self.mesh.n_active)

    def print_state(self, cputime, print_header=False):
        """
        Print a summary of the model state on stdout

        :arg float cputime: Measured CPU time in seconds
        :kwarg print_header: Whether to print column header first
        """
        n = self.mesh.n_active
        entries = [
            ('exp', self.i_export, '5d'),
            ('iter', self.iteration, '7d'),
        ]
        # generate simulation time string
        if self.options.simulation_initial_date is not None:
            now = simulation_time_to_datetime(self.simulation_time,
                                              self.options.simulation_initial_date)
            date_str = f'{now:%Y-%m-%d}'.rjust(11)
            time_str = f'{now:%H:%M:%S}'.rjust(9)
            entries += [
                ('date', date_str, '11s'),
                ('time', time_str, '9s'),
            ]
        else:
            time_str = f'{self.simulation_time:.2f}'.rjust(15)
            entries += [
                ('time', time_str, '15s'),
            ]
        entries += [
            ('M', n, '3d'),
            ('depth', self.mesh.depth, '7.3f'),
            ('max |v|', float(numpy.abs(self.fields.uv_1d[:n]).max()), '8.4f'),
            ('max c', float(self.fields.sediment_1d[:n].max()), '9.3f'),
            ('mass', self.sediment_mass(), '11.5f'),
            ('Tcpu', cputime, '6.2f'),
        ]

        if print_header:
            # generate header
            header = ' '.join([e[0].rjust(len(f'{e[1]:{e[2]}}')) for e in entries])
            print_output(header)

        # generate line
        line = ' '.join([f'{e[1]:{e[2]}}' for e in entries])
        print_output(line)
        sys.stdout.flush()

    def print_state_debug(self):
        """
        Print min/max values of prognostic/diagnostic fields for debugging.
        """
        n = self.mesh.n_active
        print_output('{:06} T={:10.2f}'.format(self.iteration, self.simulation_time))
        for fieldname in self.fields:
            print_field_value_range(self.fields[fieldname], n, name=fieldname, prefix='   ')
        if self.turbulence_model is not None:
            self.turbulence_model.print_debug()

    def export(self):
        """
        Evaluates all callbacks set to 'export' interval.
        """
        self.callbacks.evaluate(mode='export', index=self.i_export)

    def iterate(self, export_func=None):
        """
        Runs the simulation

        Iterates over the time loop for ``options.n_timesteps`` steps.
        Samples the history every ``options.history_export_interval`` steps,
        prints the state and evaluates callbacks every
        ``options.simulation_export_interval`` steps.

        :kwarg export_func: User-defined function (with no arguments) that will
            be called on every export.
        :returns: the :class:`.ColumnHistory`
        """
        if not self._initialized:
            self.initialize()
        o = self.options

        if o.log_output and not o.no_exports:
            set_log_directory(o.output_directory)
        print_output(str(o))

        dump_hdf5 = o.export_diagnostics and not o.no_exports
        if o.check_sediment_conservation:
            c = callback.SedimentMassConservationCallback(self,
                                                          export_to_hdf5=dump_hdf5,
                                                          append_to_log=True)
            self.add_callback(c, eval_interval='export')
        if o.check_sediment_overshoot:
            c = callback.FieldRangeCallback('sediment_1d', self,
                                            export_to_hdf5=dump_hdf5,
                                            append_to_log=True)
            self.add_callback(c, eval_interval='export')
        if o.fields_to_export_hdf5 and dump_hdf5:
            c = callback.VerticalProfileCallback(self, list(o.fields_to_export_hdf5),
                                                 append_to_log=False)
            self.add_callback(c, eval_interval='export')

        cputimestamp = time_mod.perf_counter()

        # initial export
        self.print_state(0.0, print_header=True)
        self.export()
        if export_func is not None:
            export_func()

        while self.iteration < o.n_timesteps:
            self.advance()

            self.callbacks.evaluate(mode='timestep')

            if self.iteration % o.history_export_interval == 0:
                self.record_history()

            if self.iteration % o.simulation_export_interval == 0:
                self.i_export += 1
                cputime = time_mod.perf_counter() - cputimestamp
                cputimestamp = time_mod.perf_counter()
                self.print_state(cputime)

                self.export()
                if export_func is not None:
                    export_func()

        if not o.no_exports:
            self.history.export(os.path.join(o.output_directory, 'history.hdf5'))
        return self.history
