"""
Tests the implicit finite volume column equation
"""
from mudcolumn import *
from mudcolumn.vertical_mesh import VerticalMesh
from mudcolumn.equation import VerticalEquation, BoundaryCondition
import pytest


@pytest.fixture
def mesh():
    mesh = VerticalMesh(0.0, 10.0, 20)
    mesh.update(8.0)
    return mesh


def test_steady_diffusion_is_linear(mesh):
    eq = VerticalEquation(mesh, theta=1.0)
    n = mesh.n_active
    x = numpy.zeros(mesh.n_max)
    bcs = {'bottom': BoundaryCondition.value(0.0),
           'top': BoundaryCondition.value(1.0)}
    for i in range(20):
        eq.solve_system(x, n, mesh.dz, 1.0e6, 1.0, numpy.full(n, 0.1), bcs)
    expected = mesh.z_center[:n]/mesh.depth
    assert numpy.allclose(x[:n], expected, rtol=1e-6)


@pytest.mark.parametrize('theta', [0.0, 0.5, 1.0])
def test_steady_state_is_preserved(mesh, theta):
    eq = VerticalEquation(mesh, theta=theta)
    n = mesh.n_active
    x = numpy.zeros(mesh.n_max)
    x[:n] = mesh.z_center[:n]/mesh.depth
    bcs = {'bottom': BoundaryCondition.value(0.0),
           'top': BoundaryCondition.value(1.0)}
    eq.solve_system(x, n, mesh.dz, 1.0, 1.0, numpy.full(n, 0.1), bcs)
    assert numpy.allclose(x[:n], mesh.z_center[:n]/mesh.depth, rtol=1e-12)


def test_inactive_cells_untouched(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    x = numpy.full(mesh.n_max, -7.0)
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    eq.solve_system(x, n, mesh.dz, 10.0, 1.0, numpy.full(n, 1e-3), bcs,
                    source=numpy.ones(n))
    assert numpy.all(x[n:] == -7.0)
    assert numpy.allclose(x[:n], -7.0 + 10.0)


def test_surface_flux_enters_domain(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    x = numpy.zeros(mesh.n_max)
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.5)}
    eq.solve_system(x, n, mesh.dz, 4.0, 2.0, numpy.full(n, 1e-2), bcs)
    total = numpy.sum(2.0*x[:n]*mesh.dz[:n])
    assert numpy.allclose(total, 0.5*4.0)
    assert x[n - 1] > x[0]


def test_implicit_sink_keeps_positivity(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    x = numpy.ones(mesh.n_max)
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    eq.solve_system(x, n, mesh.dz, 100.0, 1.0, numpy.full(n, 1e-4), bcs,
                    sink=numpy.full(n, 50.0))
    assert numpy.all(x[:n] > 0)
    assert numpy.allclose(x[:n], 1.0/(1.0 + 100.0*50.0))


def test_operator_conserves_with_settling(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    rng = numpy.random.RandomState(1)
    bands, r = eq.assemble_operator(n, mesh.dz, rng.uniform(1e-6, 1e-2, n), bcs,
                                    settling_velocity=rng.uniform(0, 1e-3, n))
    # column sums of the flux operator vanish
    col_sum = bands[1].copy()
    col_sum[1:] += bands[0, 1:]
    col_sum[:-1] += bands[2, :-1]
    assert numpy.allclose(col_sum, 0.0, atol=1e-15)
    assert numpy.all(r == 0)


def test_non_positive_diffusivity_raises(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    diffusivity = numpy.full(n, 1e-3)
    diffusivity[3] = 0.0
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    with pytest.raises(NumericalInstabilityError) as excinfo:
        eq.solve_system(numpy.ones(mesh.n_max), n, mesh.dz, 1.0, 1.0, diffusivity, bcs)
    assert excinfo.value.value == 0.0


def test_non_finite_diffusivity_raises(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    diffusivity = numpy.full(n, 1e-3)
    diffusivity[-1] = numpy.nan
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    with pytest.raises(NumericalInstabilityError):
        eq.solve_system(numpy.ones(mesh.n_max), n, mesh.dz, 1.0, 1.0, diffusivity, bcs)


def test_instability_is_logged(mesh, caplog):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    diffusivity = numpy.full(n, -1e-3)
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    with caplog.at_level('ERROR', logger='mudcolumn'):
        with pytest.raises(NumericalInstabilityError) as excinfo:
            eq.solve_system(numpy.ones(mesh.n_max), n, mesh.dz, 1.0, 1.0, diffusivity, bcs)
    records = [r for r in caplog.records if r.name == 'mudcolumn']
    assert len(records) == 1
    assert records[0].levelname == 'ERROR'
    assert records[0].getMessage() == str(excinfo.value)
    assert 'vertical equation diffusivity' in caplog.text


def test_non_positive_timestep_raises(mesh):
    eq = VerticalEquation(mesh)
    n = mesh.n_active
    bcs = {'bottom': BoundaryCondition.flux(0.0),
           'top': BoundaryCondition.flux(0.0)}
    with pytest.raises(ModelConfigurationError):
        eq.solve_system(numpy.ones(mesh.n_max), n, mesh.dz, 0.0, 1.0, 1e-3, bcs)
