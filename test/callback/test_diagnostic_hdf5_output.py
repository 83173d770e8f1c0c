"""
Tests diagnostic callbacks and hdf file output.
"""
from mudcolumn import *
from mudcolumn.callback import DiagnosticHDF5
import h5py
import pytest


@pytest.fixture(scope='session')
def tmp_outputdir(tmpdir_factory):
    fn = tmpdir_factory.mktemp('outputs')
    return str(fn)


def test_callbacks(tmp_outputdir):

    depth = 5.0
    c_init = 28.0
    dt = 10.0
    n_steps = 10
    n_max = 30

    outputdir = tmp_outputdir
    print_output('Exporting to ' + outputdir)

    def forcing(t):
        return depth, 0.0, 0.0

    # create solver
    solver_obj = solver.FlowSolver1DV(forcing=forcing)
    options = solver_obj.options
    options.timestep = dt
    options.n_timesteps = n_steps
    options.simulation_export_interval = 1
    options.history_export_interval = 1
    options.check_sediment_conservation = True
    options.check_sediment_overshoot = True
    options.fields_to_export_hdf5 = ['sediment_1d', 'uv_1d']
    options.log_output = False
    options.output_directory = outputdir

    solver_obj.create_equations()

    class ConstCallback(DiagnosticCallback):
        """Simple callback example"""
        name = 'constintegral'
        variable_names = ['constant', 'integral']

        def __init__(self, const_val, solver_obj, outputdir=None,
                     export_to_hdf5=False, append_to_log=True):
            super(ConstCallback, self).__init__(
                solver_obj,
                outputdir=outputdir,
                export_to_hdf5=export_to_hdf5,
                append_to_log=append_to_log)
            self.const_val = const_val

        def __call__(self):
            value = self.const_val
            mesh = self.solver_obj.mesh
            c = numpy.full(mesh.n_max, self.const_val)
            integral = comp_column_mass(c, mesh.dz, mesh.n_active)
            return value, integral

        def message_str(self, *args):
            line = 'Constant: {0:11.4e} Integral: {1:11.4e}'.format(*args)
            return line

    class SimpleVectorCallback(DiagnosticCallback):
        """A callback that exports a numpy array and sets some attributes."""
        name = 'dummyvector'
        variable_names = ['value']

        def __init__(self, solver_obj, array_dim=30, attrs=None,
                     outputdir=None, export_to_hdf5=False,
                     append_to_log=True):
            self.array_dim = array_dim
            super(SimpleVectorCallback, self).__init__(
                solver_obj,
                outputdir=outputdir,
                attrs=attrs,
                array_dim=self.array_dim,
                export_to_hdf5=export_to_hdf5,
                append_to_log=append_to_log)

        def __call__(self):
            time = self.solver_obj.simulation_time
            value = numpy.linspace(time, 2*time + 1, self.array_dim)
            return (value, )

        def message_str(self, *args):
            minval = args[0].min()
            maxval = args[0].max()
            line = 'Array value range: {0:11.4e} - {1:11.4e}'.format(minval,
                                                                     maxval)
            return line

    solver_obj.assign_initial_conditions(sediment=c_init)

    # test call interface for ConstCallback
    const_value = 4.5
    cb = ConstCallback(const_value,
                       solver_obj,
                       export_to_hdf5=True,
                       outputdir=solver_obj.options.output_directory)
    val, integral = cb()
    assert numpy.allclose(val, const_value)
    assert numpy.allclose(integral, const_value*depth)
    msg = cb.message_str(val, integral)
    assert msg == 'Constant:  4.5000e+00 Integral:  2.2500e+01'
    solver_obj.add_callback(cb)

    # test call interface for SimpleVectorCallback
    attrs = {'one': 1, 'two': 2}
    cb = SimpleVectorCallback(solver_obj,
                              array_dim=4,
                              attrs=attrs,
                              export_to_hdf5=True,
                              outputdir=solver_obj.options.output_directory)
    arr = cb()[0]
    assert numpy.allclose(arr, numpy.linspace(0., 1., 4))
    msg = cb.message_str(arr)
    assert msg == 'Array value range:  0.0000e+00 -  1.0000e+00'
    solver_obj.add_callback(cb)

    solver_obj.iterate()
    n_active = solver_obj.mesh.n_active

    # verify hdf file contents
    correct_time = numpy.arange(n_steps + 1, dtype=float)[:, numpy.newaxis]
    correct_time *= dt

    def diag_file(f):
        return os.path.join(outputdir, f)

    with h5py.File(diag_file('diagnostic_constintegral.hdf5'), 'r') as h5file:
        time = h5file['time'][:]
        value = h5file['constant'][:]
        integral = h5file['integral'][:]
        correct_value = numpy.ones_like(correct_time)*const_value
        correct_integral = numpy.ones_like(correct_time)*const_value*depth
        assert numpy.allclose(time, correct_time)
        assert numpy.allclose(value, correct_value)
        assert numpy.allclose(integral, correct_integral)

    with h5py.File(diag_file('diagnostic_dummyvector.hdf5'), 'r') as h5file:
        time = h5file['time'][:]
        value = h5file['value'][:]
        correct_value = numpy.zeros((n_steps + 1, 4))
        for row in range(n_steps + 1):
            t = correct_time[row, 0]
            correct_value[row, :] = numpy.linspace(t, 2*t + 1, 4)
        assert numpy.allclose(time, correct_time)
        assert numpy.allclose(value, correct_value)
        for a in attrs:
            assert a in h5file.attrs.keys()
            assert h5file.attrs[a] == attrs[a]

    with h5py.File(diag_file('diagnostic_sediment_mass.hdf5'), 'r') as h5file:
        time = h5file['time'][:]
        reldiff = h5file['relative_difference'][:]
        integral = h5file['integral'][:]
        correct_integral = numpy.ones_like(correct_time)*depth*c_init
        correct_reldiff = numpy.zeros_like(correct_time)
        assert numpy.allclose(time, correct_time)
        assert numpy.allclose(reldiff, correct_reldiff, atol=1e-12)
        assert numpy.allclose(integral, correct_integral)

    with h5py.File(diag_file('diagnostic_sediment_1d_overshoot.hdf5'), 'r') as h5file:
        undershoot = h5file['undershoot'][:]
        overshoot = h5file['overshoot'][:]
        min_value = h5file['min_value'][:]
        assert undershoot.shape == (n_steps + 1, 1)
        assert numpy.all(undershoot <= 0.0)
        assert numpy.all(overshoot >= 0.0)
        assert numpy.all(min_value >= 0.0)

    with h5py.File(diag_file('diagnostic_vertprofile_sediment-uv.hdf5'), 'r') as h5file:
        z = h5file['z_coord'][:]
        sediment = h5file['sediment'][:]
        uv = h5file['uv'][:]
        assert sediment.shape == (n_steps + 1, n_max)
        assert numpy.allclose(sediment[0, :n_active], c_init)
        assert numpy.all(numpy.isnan(sediment[:, n_active:]))
        assert numpy.allclose(uv[:, :n_active], 0.0)
        assert numpy.all(numpy.diff(z[-1, :n_active]) > 0)

    with h5py.File(diag_file('history.hdf5'), 'r') as h5file:
        assert h5file['sediment'].shape == (n_max, n_steps)
        assert numpy.allclose(h5file['depth'][:], depth)


def test_hdf5_index(tmp_outputdir):
    fname = os.path.join(tmp_outputdir, 'diagnostic_index.hdf5')
    exporter = DiagnosticHDF5(fname, ['a', 'b'], array_dim=3)
    for i in range(3):
        exporter.export((numpy.full(3, i), numpy.full(3, -i)), time=float(i))
    # overwrite an existing entry
    exporter.export((numpy.full(3, 7.0), numpy.zeros(3)), time=1.0, index=1)
    with pytest.raises(IndexError):
        exporter.export((numpy.zeros(3), numpy.zeros(3)), time=9.0, index=5)
    with pytest.raises(ValueError):
        exporter.export((numpy.zeros(3), numpy.zeros(3)))
    with h5py.File(fname, 'r') as h5file:
        assert h5file['a'].shape == (3, 3)
        assert numpy.allclose(h5file['a'][1], 7.0)
        assert numpy.allclose(h5file['time'][:, 0], [0.0, 1.0, 2.0])


def test_hdf5_missing_time_leaves_file_intact(tmp_outputdir):
    fname = os.path.join(tmp_outputdir, 'diagnostic_missing_time.hdf5')
    exporter = DiagnosticHDF5(fname, ['a'], array_dim=2)
    exporter.export((numpy.ones(2), ), time=0.0)
    for _ in range(2):
        with pytest.raises(ValueError):
            exporter.export((numpy.full(2, 5.0), ))
    with h5py.File(fname, 'r') as h5file:
        assert h5file['a'].shape == (1, 2)
        assert h5file['time'].shape == (1, 1)
        assert numpy.allclose(h5file['time'][:, 0], [0.0])
    exporter.export((numpy.full(2, 3.0), ), time=1.0)
    with h5py.File(fname, 'r') as h5file:
        assert h5file['a'].shape == (2, 2)
        assert numpy.allclose(h5file['a'][1], 3.0)
        assert numpy.allclose(h5file['time'][:, 0], [0.0, 1.0])


def test_write_mode_append(tmp_outputdir):
    solver_obj = solver.FlowSolver1DV(forcing=lambda t: (4.0, 0.0, 0.0))
    solver_obj.options.output_directory = os.path.join(tmp_outputdir, 'append')
    solver_obj.assign_initial_conditions(sediment=10.0)
    cb = SedimentMassConservationCallback(solver_obj, append_to_log=False)
    cb.evaluate()
    cb2 = SedimentMassConservationCallback(solver_obj, append_to_log=False)
    cb2.set_write_mode('append')
    cb2.evaluate()
    with pytest.raises(ValueError):
        cb2.set_write_mode('overwrite')
    fname = os.path.join(tmp_outputdir, 'append', 'diagnostic_sediment_mass.hdf5')
    with h5py.File(fname, 'r') as h5file:
        assert h5file['integral'].shape == (2, 1)
        assert numpy.allclose(h5file['integral'][:], 40.0)
