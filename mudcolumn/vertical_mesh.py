r"""
Moving boundary vertical mesh
=============================

The water column between the fixed bed :math:`z_b` and the free surface
:math:`z_b + h(t)` is discretized with cells of nominal thickness
:math:`\Delta z`. All cells are :math:`\Delta z` thick except the top one,
which absorbs the remainder so that the cell thicknesses always sum up to the
water depth. Cells are added or removed at the top as the depth changes.

When the number of active cells changes, the sediment concentration in the
top cells is redistributed by :class:`GridChangeRemapper` such that the
column integral of :math:`c \Delta z` is conserved.
"""
from .utility import *


def update_vertical_discretisation(depth, z_bottom, dz_nominal, n_max,
                                   min_fraction=0.5):
    r"""
    Compute cell thicknesses and centers for the given water depth.

    The number of active cells is

    .. math::
        M = \min(M_{max}, \lfloor h/\Delta z \rfloor + \delta)

    where :math:`\delta=1` if the remainder :math:`r = h - \lfloor h/\Delta z
    \rfloor \Delta z` is at least ``min_fraction`` times :math:`\Delta z`,
    otherwise the remainder is merged in the cell below. The top cell is
    therefore between ``min_fraction`` and ``1 + min_fraction`` times
    :math:`\Delta z` thick, unless the column only has one cell.

    :arg float depth: water depth, must be positive
    :arg float z_bottom: bed elevation
    :arg float dz_nominal: nominal cell thickness
    :arg int n_max: maximum number of cells
    :kwarg float min_fraction: minimum relative thickness of the top cell
    :returns: tuple ``(dz, z_center, n_active)`` where ``dz`` and
        ``z_center`` have ``n_max`` entries, zero above ``n_active``
    """
    if not depth > 0.0:
        raise ModelConfigurationError('Water depth must be positive, got {:}'.format(depth))
    n_full = int(numpy.floor(depth/dz_nominal))
    remainder = depth - n_full*dz_nominal
    n_active = n_full
    if n_full == 0 or remainder >= min_fraction*dz_nominal:
        n_active += 1
    n_active = min(n_active, n_max)

    dz = numpy.zeros(n_max)
    dz[:n_active - 1] = dz_nominal
    dz[n_active - 1] = depth - (n_active - 1)*dz_nominal
    z_center = numpy.zeros(n_max)
    z_center[:n_active] = z_bottom + numpy.cumsum(dz[:n_active]) - 0.5*dz[:n_active]
    return dz, z_center, n_active


class VerticalMesh(object):
    """
    Vertical discretization of the water column.

    Holds the fixed-capacity mesh arrays and updates them for the
    instantaneous water depth.

    .. code-block:: python

        mesh = VerticalMesh(0.0, 7.1, 30)
        mesh.update(5.54)
        mesh.n_active, mesh.dz[:mesh.n_active]

    """
    def __init__(self, z_bottom, z_top, n_max, min_fraction=0.5):
        """
        :arg float z_bottom: bed elevation
        :arg float z_top: highest elevation covered by ``n_max`` nominal cells
        :arg int n_max: maximum number of cells
        :kwarg float min_fraction: minimum relative thickness of the top cell
        """
        if not z_top > z_bottom:
            raise ModelConfigurationError('z_top must be above z_bottom')
        if n_max < 1:
            raise ModelConfigurationError('At least one cell is required, got {:}'.format(n_max))
        self.z_bottom = z_bottom
        self.z_top = z_top
        self.n_max = n_max
        self.min_fraction = min_fraction
        self.dz_nominal = (z_top - z_bottom)/n_max
        self.dz = numpy.zeros(n_max)
        self.z_center = numpy.zeros(n_max)
        self.n_active = 0
        self.n_active_old = 0
        self.depth = 0.0

    @property
    def capacity(self):
        """Largest water depth that does not stretch the top cell"""
        return self.z_top - self.z_bottom

    @property
    def size_changed(self):
        """True if the last update changed the number of active cells"""
        return self.n_active != self.n_active_old

    def update(self, depth):
        """
        Update the mesh for a new water depth.

        :arg float depth: water depth
        :returns: the number of active cells
        """
        dz, z_center, n_active = update_vertical_discretisation(
            depth, self.z_bottom, self.dz_nominal, self.n_max,
            min_fraction=self.min_fraction)
        if depth > self.capacity and self.depth <= self.capacity:
            warning('Water depth {:.3f} m exceeds mesh capacity {:.3f} m, '
                    'stretching the top cell'.format(depth, self.capacity))
        self.n_active_old = self.n_active
        self.dz[:] = dz
        self.z_center[:] = z_center
        self.n_active = n_active
        self.depth = depth
        return n_active


def remap_concentration(c, dz, dz_top_old, dz_below_top_old, n_active, n_active_old):
    r"""
    Conservative redistribution of concentration after a mesh size change.

    Only a window at the top of the column is modified. It starts one cell
    below the lower of the old and new top cells,
    :math:`s = \min(M, M_{old}) - 1`. The mass in the window

    .. math::
        m = \sum_{i=s}^{M_{old}-1} c_i \Delta z^{old}_i

    is spread uniformly over the new window cells :math:`s \dots M-1`.
    When cells are removed this merges their mass into the new top cell;
    when cells are added the old top cell mass is split over itself and the
    new cells proportionally to their thickness.

    Old thicknesses are ``dz_top_old`` for the old top cell and
    ``dz_below_top_old`` for every old cell below it.

    :arg c: concentration array, modified in place
    :arg dz: new cell thicknesses
    :arg float dz_top_old: previous thickness of the top cell
    :arg float dz_below_top_old: previous thickness of the cell below the top
    :arg int n_active: new number of active cells
    :arg int n_active_old: previous number of active cells
    :returns: the concentration array
    """
    if n_active == n_active_old:
        return c
    start = min(n_active, n_active_old) - 1
    dz_old = numpy.full(n_active_old - start, dz_below_top_old)
    dz_old[-1] = dz_top_old
    mass = numpy.sum(c[start:n_active_old]*dz_old)
    c[start:n_active] = mass/numpy.sum(dz[start:n_active])
    return c


class GridChangeRemapper(object):
    """
    Tracks the top of the previous mesh and remaps the concentration field
    whenever the number of active cells changes.
    """
    def __init__(self, mesh):
        """
        :arg mesh: :class:`VerticalMesh` object
        """
        self.mesh = mesh
        self.n_active_old = None
        self.dz_top_old = None
        self.dz_below_top_old = None

    def _store(self):
        n = self.mesh.n_active
        self.n_active_old = n
        self.dz_top_old = self.mesh.dz[n - 1]
        if n > 1:
            self.dz_below_top_old = self.mesh.dz[n - 2]
        else:
            self.dz_below_top_old = self.mesh.dz_nominal

    def initialize(self):
        """Store the current mesh as the reference state"""
        self._store()

    def remap(self, c):
        """
        Remap concentration from the previous mesh to the current one.

        :arg c: concentration array, modified in place
        :returns: the concentration array
        """
        if self.n_active_old is None:
            self._store()
            return c
        if self.mesh.n_active != self.n_active_old:
            debug('Remapping concentration from {:} to {:} cells'.format(
                self.n_active_old, self.mesh.n_active))
        remap_concentration(c, self.mesh.dz, self.dz_top_old,
                            self.dz_below_top_old,
                            self.mesh.n_active, self.n_active_old)
        self._store()
        return c
