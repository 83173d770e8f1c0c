"""
Routines for handling history and file exports.
"""
from .utility import *
from .timezone import datetime_to_epoch, simulation_time_to_datetime
import datetime
import h5py

#: fields stored in the history, in output order
history_fields = ['uv_magnitude', 'sediment', 'tke', 'shear_magnitude']


class ColumnHistory(object):
    """
    Time-decimated samples of the column state.

    Every sample stores the first ``n_active`` values of each field in a
    column of a ``(n_max, n_samples)`` array. Entries above the active cells
    are NaN.

    .. code-block:: python

        history = ColumnHistory(30)
        history.record(t, mesh, uv_magnitude=..., sediment=..., tke=...,
                       shear_magnitude=...)
        history.sediment  # (30, n_samples) array
        history.export('outputs/history.hdf5')

    """
    def __init__(self, n_max, initial_date=None):
        """
        :arg int n_max: maximum number of vertical cells
        :kwarg initial_date: timezone aware datetime of ``t=0``
        """
        self.n_max = n_max
        self.initial_date = initial_date
        self._time = []
        self._n_active = []
        self._depth = []
        self._columns = OrderedDict((f, []) for f in history_fields)
        self._cache = {}

    def __len__(self):
        return len(self._time)

    def record(self, t, mesh, **fields):
        """
        Append a sample

        :arg float t: elapsed simulation time
        :arg mesh: :class:`.VerticalMesh` object
        :arg fields: arrays of all :data:`history_fields`
        """
        missing = set(history_fields).difference(fields)
        if missing:
            raise ValueError('Missing history fields: {:}'.format(sorted(missing)))
        n = mesh.n_active
        self._time.append(t)
        self._n_active.append(n)
        self._depth.append(mesh.depth)
        for name in history_fields:
            col = numpy.full(self.n_max, numpy.nan)
            col[:n] = fields[name][:n]
            self._columns[name].append(col)
        self._cache.clear()

    def _array(self, name):
        if name not in self._cache:
            cols = self._columns[name]
            if cols:
                self._cache[name] = numpy.stack(cols, axis=1)
            else:
                self._cache[name] = numpy.zeros((self.n_max, 0))
        return self._cache[name]

    @property
    def time(self):
        """Elapsed simulation time of each sample"""
        return numpy.array(self._time)

    @property
    def n_active(self):
        """Number of active cells of each sample"""
        return numpy.array(self._n_active, dtype=int)

    @property
    def depth(self):
        """Water depth of each sample"""
        return numpy.array(self._depth)

    @property
    def uv_magnitude(self):
        return self._array('uv_magnitude')

    @property
    def sediment(self):
        return self._array('sediment')

    @property
    def tke(self):
        return self._array('tke')

    @property
    def shear_magnitude(self):
        return self._array('shear_magnitude')

    @property
    def dates(self):
        """Calendar dates of the samples, None if no initial date is set"""
        if self.initial_date is None:
            return None
        return [simulation_time_to_datetime(t, self.initial_date) for t in self._time]

    def _to_seconds(self, t):
        if isinstance(t, datetime.datetime):
            if self.initial_date is None:
                raise ValueError('Calendar dates require an initial date')
            return datetime_to_epoch(t) - datetime_to_epoch(self.initial_date)
        return t

    def window(self, t_start=None, t_end=None):
        """
        Extract the samples in the closed interval ``[t_start, t_end]``

        Bounds are elapsed seconds or timezone aware datetimes. None means
        unbounded.

        :returns: a new :class:`ColumnHistory`
        """
        t = self.time
        mask = numpy.ones(len(t), dtype=bool)
        if t_start is not None:
            mask &= t >= self._to_seconds(t_start)
        if t_end is not None:
            mask &= t <= self._to_seconds(t_end)
        out = ColumnHistory(self.n_max, initial_date=self.initial_date)
        for i in numpy.nonzero(mask)[0]:
            out._time.append(self._time[i])
            out._n_active.append(self._n_active[i])
            out._depth.append(self._depth[i])
            for name in history_fields:
                out._columns[name].append(self._columns[name][i])
        return out

    def export(self, filename, attrs=None):
        """
        Store the history in a HDF5 file.

        Each field is a dataset with the field meta data as attributes.

        :arg str filename: output file name
        :kwarg dict attrs: additional global attributes
        """
        outputdir = os.path.dirname(filename)
        if outputdir:
            create_directory(outputdir)
        with h5py.File(filename, 'w') as hdf5file:
            ds = hdf5file.create_dataset('time', data=self.time)
            if self.initial_date is not None:
                ds.attrs['units'] = 'seconds since ' + self.initial_date.isoformat()
            else:
                ds.attrs['units'] = 's'
            hdf5file.create_dataset('n_active', data=self.n_active)
            ds = hdf5file.create_dataset('depth', data=self.depth)
            ds.attrs['units'] = 'm'
            for name in history_fields:
                ds = hdf5file.create_dataset(name, data=self._array(name))
                meta = field_metadata[name]
                ds.attrs['name'] = meta['name']
                ds.attrs['units'] = meta['unit']
            hdf5file.attrs['n_max'] = self.n_max
            if attrs is not None:
                hdf5file.attrs.update(attrs)
        debug('Stored history with {:} samples in {:}'.format(len(self), filename))
        return filename
