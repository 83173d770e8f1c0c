"""
Defines custom callback functions used to compute various metrics at runtime.

"""
from .utility import *
from abc import ABC, abstractmethod
import h5py
from collections import defaultdict
from .log import *
import numpy


class CallbackManager(defaultdict):
    """
    Stores callbacks in different categories and provides methods for
    evaluating them.

    Create callbacks and register them under ``'export'`` mode

    .. code-block:: python

        cb1 = SedimentMassConservationCallback(...)
        cb2 = FieldRangeCallback(...)
        cm = CallbackManager()
        cm.add(cb1, 'export')
        cm.add(cb2, 'export')

    Evaluate callbacks, calls :func:`evaluate` method of all callbacks
    registered in the given mode.

    .. code-block:: python

        cm.evaluate('export')

    """
    def __init__(self):
        super(CallbackManager, self).__init__(OrderedDict)

    def add(self, callback, mode):
        """
        Add a callback under the given mode

        :arg callback: a :class:`.DiagnosticCallback` object
        :arg str mode: register callback under this mode
        """
        key = callback.name
        self[mode][key] = callback

    def evaluate(self, mode, index=None):
        """
        Evaluate all callbacks registered under the given mode

        :arg str mode: evaluate all callbacks under this mode
        :kwarg int index: if provided, sets the export index. Default behavior
            is to append to the file or stream.
        """
        for key in sorted(self[mode]):
            self[mode][key].evaluate(index=index)


class DiagnosticHDF5(object):
    """
    A HDF5 file for storing diagnostic time series arrays.
    """
    def __init__(self, filename, varnames, array_dim=1, attrs=None,
                 var_attrs=None, new_file=True, dtype='d', include_time=True):
        """
        :arg str filename: Full filename of the HDF5 file.
        :arg varnames: List of variable names that the diagnostic callback
            provides
        :kwarg array_dim: Dimension of the output array.
            Can be a tuple for multi-dimensional output. Use "1" for scalars.
        :kwarg dict attrs: Global attributes to be saved in the hdf5 file.
        :kwarg dict var_attrs: nested dict of variable specific attributes,
             e.g. {'time': {'units': 'seconds since 2014-11-19 16:10:00+01:00'}}
        :kwarg bool new_file: Define whether to create a new hdf5 file or
            append to an existing one (if any)
        :kwarg dtype: array datatype
        :kwarg include_time: whether to include time array in the file
        """
        self.filename = filename
        self.varnames = varnames
        self.nvars = len(varnames)
        self.array_dim = array_dim
        self.include_time = include_time
        if new_file:
            # create empty file with correct datasets
            with h5py.File(filename, 'w') as hdf5file:
                if include_time:
                    ds = hdf5file.create_dataset(
                        'time', (0, 1), maxshape=(None, 1), dtype=dtype)
                    if var_attrs is not None and 'time' in var_attrs:
                        ds.attrs.update(var_attrs['time'])
                dim_list = array_dim
                if isinstance(dim_list, tuple):
                    dim_list = list(dim_list)
                elif not isinstance(dim_list, list):
                    dim_list = list([dim_list])
                shape = tuple([0] + dim_list)
                max_shape = tuple([None] + dim_list)
                for var in self.varnames:
                    ds = hdf5file.create_dataset(
                        var, shape, maxshape=max_shape, dtype=dtype)
                    if var_attrs is not None and var in var_attrs:
                        ds.attrs.update(var_attrs[var])
                if attrs is not None:
                    hdf5file.attrs.update(attrs)

    def _expand(self, hdf5file):
        """Expands all data arrays by 1 entry"""
        names = list(self.varnames)
        if self.include_time:
            names.append('time')
        for var in names:
            arr = hdf5file[var]
            arr.resize(arr.shape[0] + 1, axis=0)

    def _nentries(self, hdf5file):
        return hdf5file[self.varnames[0]].shape[0]

    def export(self, variables, time=None, index=None):
        """
        Appends a new entry of (time, variables) to the file.

        The HDF5 is updated immediately.

        :arg variables: values of entry
        :type variables: tuple of float or arrays
        :kwarg time: time stamp of entry
        :type time: float
        :kwarg int index: If provided, defines the time index in the file
        """
        if self.include_time and time is None:
            raise ValueError('time should be provided as 2nd argument to export()')
        with h5py.File(self.filename, 'a') as hdf5file:
            ix = None
            if index is not None:
                nentries = self._nentries(hdf5file)
                if index > nentries:
                    raise IndexError('time index out of range {:} > {:} in file {:}'.format(
                        index, nentries, self.filename))
                if index < nentries:
                    ix = index
            if ix is None:
                self._expand(hdf5file)
                ix = self._nentries(hdf5file) - 1
            if self.include_time:
                hdf5file['time'][ix] = time
            for i in range(self.nvars):
                hdf5file[self.varnames[i]][ix, :] = variables[i]


class DiagnosticCallback(ABC):
    """
    A base class for all Callback classes
    """
    name = None
    variable_names = None

    def __init__(self, solver_obj, array_dim=1, attrs=None,
                 outputdir=None,
                 export_to_hdf5=True,
                 append_to_log=True,
                 include_time=True,
                 hdf5_dtype='d'):
        """
        :arg solver_obj: :class:`.FlowSolver1DV` object
        :kwarg str outputdir: Custom directory where hdf5 files will be stored.
            By default solver's output directory is used.
        :kwarg array_dim: Dimension of the output array.
            Can be a tuple for multi-dimensional output. Use "1" for scalars.
        :kwarg dict attrs: Global attributes to be saved in the hdf5 file.
        :kwarg bool export_to_hdf5: If True, diagnostics will be stored in hdf5
            format
        :kwarg bool append_to_log: If True, callback output messages will be
            printed in log
        :kwarg bool include_time: whether to include time in the hdf5 file
        :kwarg hdf5_dtype: Precision to use in hdf5 output: `d` for double
            precision (default), and `f` for single precision
        """
        if attrs is None:
            attrs = {}
        self.solver_obj = solver_obj
        self.outputdir = outputdir or self.solver_obj.options.output_directory
        self.array_dim = array_dim
        self.attrs = attrs
        self.var_attrs = {}
        self.append_to_hdf5 = export_to_hdf5
        self.append_to_log = append_to_log
        self.hdf5_dtype = hdf5_dtype
        self.include_time = include_time
        self._create_new_file = True
        self._hdf5_initialized = False

        init_date = self.solver_obj.options.simulation_initial_date
        if init_date is not None and include_time:
            time_units = 'seconds since ' + init_date.isoformat()
            self.var_attrs['time'] = {'units': time_units}

    def set_write_mode(self, mode):
        """
        Define whether to create a new hdf5 file or append to an existing one

        :arg str mode: Either 'create' (default) or 'append'
        """
        if mode not in ['create', 'append']:
            raise ValueError('Unknown write mode: ' + mode)
        self._create_new_file = mode == 'create'

    def _create_hdf5_file(self):
        """
        Creates an empty hdf5 file with correct datasets.
        """
        create_directory(self.outputdir)
        fname = 'diagnostic_{:}.hdf5'.format(self.name.replace(' ', '_'))
        fname = os.path.join(self.outputdir, fname)
        self.hdf_exporter = DiagnosticHDF5(fname, self.variable_names,
                                           array_dim=self.array_dim,
                                           new_file=self._create_new_file,
                                           attrs=self.attrs,
                                           var_attrs=self.var_attrs,
                                           dtype=self.hdf5_dtype,
                                           include_time=self.include_time)
        self._hdf5_initialized = True

    @abstractmethod
    def __call__(self):
        """
        Evaluate the diagnostic value.
        """
        pass

    @abstractmethod
    def message_str(self, *args):
        """
        A string representation.

        :arg args: If provided, these will be the return value from
            :meth:`__call__`.
        """
        return "{} diagnostic".format(self.name)

    def push_to_log(self, time, args):
        """
        Push callback status message to log

        :arg time: time stamp of entry
        :arg args: the return value from :meth:`__call__`.
        """
        print_output(self.message_str(*args))

    def push_to_hdf5(self, time, args, index=None):
        """
        Append values to HDF5 file.

        :arg time: time stamp of entry
        :arg args: the return value from :meth:`__call__`.
        """
        if not self._hdf5_initialized:
            self._create_hdf5_file()
        self.hdf_exporter.export(args, time=time, index=index)

    def evaluate(self, index=None):
        """
        Evaluates callback and pushes values to log and hdf file (if enabled)
        """
        values = self.__call__()
        time = self.solver_obj.simulation_time
        if self.append_to_log:
            self.push_to_log(time, values)
        if self.append_to_hdf5:
            self.push_to_hdf5(time, values, index=index)


class ScalarConservationCallback(DiagnosticCallback):
    """Base class for callbacks that check conservation of a scalar quantity"""
    variable_names = ['integral', 'relative_difference']

    def __init__(self, scalar_callback, solver_obj, **kwargs):
        """
        Creates scalar conservation check callback object

        :arg scalar_callback: Python function that returns a scalar quantity
            of interest
        :arg solver_obj: :class:`.FlowSolver1DV` object
        :arg kwargs: any additional keyword arguments, see
            :class:`.DiagnosticCallback`.
        """
        super(ScalarConservationCallback, self).__init__(solver_obj, **kwargs)
        self.scalar_callback = scalar_callback
        self.initial_value = None

    def __call__(self):
        value = self.scalar_callback()
        if self.initial_value is None:
            self.initial_value = value
        if self.initial_value == 0.0:
            rel_diff = value - self.initial_value
        else:
            rel_diff = (value - self.initial_value)/self.initial_value
        return value, rel_diff

    def message_str(self, *args):
        line = '{0:s} rel. error {1:11.4e}'.format(self.name, args[1])
        return line


class SedimentMassConservationCallback(ScalarConservationCallback):
    """
    Checks conservation of the column integrated sediment mass (kg m-2)

    The mass is exactly conserved while the depth is fixed and across
    changes in the number of active cells. When the depth changes but the
    number of active cells does not, the top cell thickness changes while
    its concentration is held, so the reported mass follows the depth.
    """
    name = 'sediment mass'

    def __init__(self, solver_obj, **kwargs):
        """
        :arg solver_obj: :class:`.FlowSolver1DV` object
        :arg kwargs: any additional keyword arguments, see
            :class:`.DiagnosticCallback`.
        """
        def mass():
            return comp_column_mass(self.solver_obj.fields.sediment_1d,
                                    self.solver_obj.mesh.dz,
                                    self.solver_obj.mesh.n_active)
        super(SedimentMassConservationCallback, self).__init__(mass, solver_obj, **kwargs)


class MinMaxConservationCallback(DiagnosticCallback):
    """Base class for callbacks that check conservation of a minimum/maximum"""
    variable_names = ['min_value', 'max_value', 'undershoot', 'overshoot']

    def __init__(self, minmax_callback, solver_obj, **kwargs):
        """
        :arg minmax_callback: Python function that returns a (min, max) value
            tuple
        :arg solver_obj: :class:`.FlowSolver1DV` object
        :arg kwargs: any additional keyword arguments, see
            :class:`.DiagnosticCallback`.
        """
        super(MinMaxConservationCallback, self).__init__(solver_obj, **kwargs)
        self.minmax_callback = minmax_callback
        self.initial_value = None

    def __call__(self):
        value = self.minmax_callback()
        if self.initial_value is None:
            self.initial_value = value
        overshoot = max(value[1] - self.initial_value[1], 0.0)
        undershoot = min(value[0] - self.initial_value[0], 0.0)
        return value[0], value[1], undershoot, overshoot

    def message_str(self, *args):
        line = '{0:s} {1:g} {2:g}'.format(self.name, args[2], args[3])
        return line


class FieldRangeCallback(MinMaxConservationCallback):
    """Checks the value range of a column field over the active cells"""
    name = 'field range'

    def __init__(self, field_name, solver_obj, **kwargs):
        """
        :arg field_name: Name of the field. Use canonical field names as in
            :class:`.FieldDict`.
        :arg solver_obj: :class:`.FlowSolver1DV` object
        :arg kwargs: any additional keyword arguments, see
            :class:`.DiagnosticCallback`.
        """
        self.name = field_name + ' overshoot'

        def minmax():
            n = self.solver_obj.mesh.n_active
            values = self.solver_obj.fields[field_name][:n]
            return values.min(), values.max()
        super(FieldRangeCallback, self).__init__(minmax, solver_obj, **kwargs)


class VerticalProfileCallback(DiagnosticCallback):
    """
    Extract vertical profiles of column fields

    Profiles have the maximum number of layers. Entries above the active
    cells are NaN.
    """
    name = 'vertprofile'
    variable_names = ['z_coord', 'value']

    def __init__(self, solver_obj, fieldnames, outputdir=None,
                 export_to_hdf5=True, append_to_log=True):
        """
        :arg solver_obj: :class:`.FlowSolver1DV` object
        :arg fieldnames: List of fields to extract
        :kwarg str outputdir: Custom directory where hdf5 files will be stored.
            By default solver's output directory is used.
        :kwarg bool export_to_hdf5: If True, diagnostics will be stored in hdf5
            format
        :kwarg bool append_to_log: If True, callback output messages will be
            printed in log
        """
        self.fieldnames = fieldnames
        field_short_names = [f.rsplit('_', 1)[0] for f in self.fieldnames]
        field_str = '-'.join(field_short_names)
        self.variable_names = ['z_coord'] + field_short_names
        self.name = 'vertprofile_' + field_str
        attrs = {
            'field_names': numpy.array(fieldnames, dtype='S'),
            'units': numpy.array([field_metadata[f]['unit'] for f in fieldnames], dtype='S'),
        }
        super(VerticalProfileCallback, self).__init__(
            solver_obj,
            outputdir=outputdir,
            array_dim=solver_obj.mesh.n_max,
            attrs=attrs,
            export_to_hdf5=export_to_hdf5,
            append_to_log=append_to_log)

    def _padded(self, values):
        n = self.solver_obj.mesh.n_active
        out = numpy.full(self.solver_obj.mesh.n_max, numpy.nan)
        out[:n] = values[:n]
        return out

    def __call__(self):
        outvals = [self._padded(self.solver_obj.mesh.z_center)]
        for fieldname in self.fieldnames:
            outvals.append(self._padded(self.solver_obj.fields[fieldname]))
        return tuple(outvals)

    def message_str(self, *args):
        out = []
        for fieldname, prof in zip(self.fieldnames, args[1:]):
            out.append('Evaluated {:} profile: range {:.3g} - {:.3g}'.format(
                fieldname, numpy.nanmin(prof), numpy.nanmax(prof)))
        return '\n'.join(out)
