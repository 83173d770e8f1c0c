"""
Tests the column history
"""
from mudcolumn import *
from mudcolumn.vertical_mesh import VerticalMesh
from mudcolumn.timezone import timezone_cet
import h5py
import pytest


def make_history(initial_date=None):
    mesh = VerticalMesh(0.0, 7.1, 30)
    history = ColumnHistory(30, initial_date=initial_date)
    for i, depth in enumerate([5.54, 4.3, 7.0]):
        mesh.update(depth)
        n = mesh.n_active
        values = numpy.arange(30, dtype=float) + i
        history.record(600.0*(i + 1), mesh, uv_magnitude=values,
                       sediment=2*values, tke=numpy.full(30, 1e-5),
                       shear_magnitude=numpy.zeros(30))
        assert history.n_active[-1] == n
    return history


def test_record():
    history = make_history()
    assert len(history) == 3
    assert numpy.allclose(history.time, [600.0, 1200.0, 1800.0])
    assert history.sediment.shape == (30, 3)
    for j, n in enumerate(history.n_active):
        assert numpy.allclose(history.sediment[:n, j], 2*(numpy.arange(n) + j))
        assert numpy.all(numpy.isnan(history.uv_magnitude[n:, j]))
    assert history.n_active[1] < history.n_active[0] < history.n_active[2]
    assert numpy.allclose(history.depth, [5.54, 4.3, 7.0])
    assert history.dates is None


def test_missing_field_raises():
    mesh = VerticalMesh(0.0, 7.1, 30)
    mesh.update(5.0)
    history = ColumnHistory(30)
    with pytest.raises(ValueError):
        history.record(0.0, mesh, uv_magnitude=numpy.zeros(30))
    assert len(history) == 0


def test_window_seconds():
    history = make_history()
    sub = history.window(t_start=1000.0)
    assert len(sub) == 2
    assert numpy.allclose(sub.time, [1200.0, 1800.0])
    sub = history.window(t_start=600.0, t_end=1200.0)
    assert len(sub) == 2
    assert numpy.array_equal(sub.tke, history.tke[:, :2], equal_nan=True)
    assert len(history.window(t_start=5000.0)) == 0


def test_window_dates():
    init_date = datetime.datetime(2014, 11, 19, 16, 10, tzinfo=timezone_cet)
    history = make_history(initial_date=init_date)
    dates = history.dates
    assert dates[0] == datetime.datetime(2014, 11, 19, 16, 20, tzinfo=timezone_cet)
    sub = history.window(
        t_start=datetime.datetime(2014, 11, 19, 16, 30, tzinfo=timezone_cet),
        t_end=datetime.datetime(2014, 11, 19, 16, 35, tzinfo=timezone_cet))
    assert len(sub) == 1
    assert numpy.allclose(sub.time, [1200.0])


def test_window_dates_require_initial_date():
    history = make_history()
    with pytest.raises(ValueError):
        history.window(t_start=datetime.datetime(2014, 11, 19, tzinfo=timezone_cet))


def test_export(tmp_path):
    init_date = datetime.datetime(2014, 11, 19, 16, 10, tzinfo=timezone_cet)
    history = make_history(initial_date=init_date)
    fname = str(tmp_path / 'outputs' / 'history.hdf5')
    history.export(fname, attrs={'case': 'test'})
    with h5py.File(fname, 'r') as h5file:
        assert h5file.attrs['n_max'] == 30
        assert h5file.attrs['case'] == 'test'
        assert h5file['time'].attrs['units'].startswith('seconds since 2014-11-19T16:10:00')
        assert numpy.array_equal(h5file['n_active'][:], history.n_active)
        sediment = h5file['sediment'][:]
        assert sediment.shape == (30, 3)
        assert numpy.array_equal(sediment, history.sediment, equal_nan=True)
        assert h5file['sediment'].attrs['units'] == field_metadata['sediment']['unit']
