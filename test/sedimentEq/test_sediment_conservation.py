"""
Tests mass conservation and positivity of the sediment equation
"""
from mudcolumn import *
from mudcolumn.vertical_mesh import VerticalMesh
from mudcolumn.sediment_eq import SedimentEquation
from mudcolumn.closures import evaluate_closures
from mudcolumn.options import SedimentModelOptions
import pytest


@pytest.fixture
def mesh():
    mesh = VerticalMesh(0.0, 7.1, 30)
    mesh.update(5.54)
    return mesh


@pytest.mark.parametrize('theta', [0.5, 1.0])
def test_mass_conservation(mesh, theta):
    eq = SedimentEquation(mesh, theta=theta)
    n = mesh.n_active
    rng = numpy.random.RandomState(10)
    c = numpy.zeros(mesh.n_max)
    c[:n] = rng.uniform(5.0, 80.0, n)
    mass0 = comp_column_mass(c, mesh.dz, n)
    for i in range(50):
        diffusivity = rng.uniform(1e-6, 1e-2, n)
        w_s = rng.uniform(0.0, 1e-3, n)
        eq.solve(c, 10.0, diffusivity, w_s)
        mass = comp_column_mass(c, mesh.dz, n)
        assert abs(mass - mass0)/mass0 < 1e-10


def test_settling_accumulates_at_bed(mesh):
    eq = SedimentEquation(mesh)
    n = mesh.n_active
    c = numpy.zeros(mesh.n_max)
    c[:n] = 28.0
    mass0 = comp_column_mass(c, mesh.dz, n)
    for i in range(500):
        eq.solve(c, 10.0, numpy.full(n, 1e-6), numpy.full(n, 1e-3))
    assert numpy.all(c[:n] >= 0)
    assert c[0] > 28.0
    assert c[n - 1] < 28.0
    assert c[:n].argmax() == 0
    assert abs(comp_column_mass(c, mesh.dz, n) - mass0)/mass0 < 1e-10


def test_mass_conservation_with_closures(mesh):
    sed_options = SedimentModelOptions()
    eq = SedimentEquation(mesh)
    n = mesh.n_active
    uv = numpy.zeros(mesh.n_max)
    uv[:n] = 0.8*numpy.log1p(mesh.z_center[:n]/1e-4)/numpy.log1p(mesh.depth/1e-4)
    c = numpy.full(mesh.n_max, 28.0)
    c[:4] = 250.0
    tke = numpy.full(mesh.n_max, 1e-4)
    omega = numpy.full(mesh.n_max, 0.5)
    mass0 = comp_column_mass(c, mesh.dz, n)
    for i in range(200):
        f = evaluate_closures(uv, c, tke, omega, mesh.z_center, n, sed_options)
        eq.solve(c, 10.0, f.diffusivity, f.w_s)
    assert abs(comp_column_mass(c, mesh.dz, n) - mass0)/mass0 < 1e-10
    assert c[:n].min() >= 0.0
    assert c[:n].max() < sed_options.sediment_density
