r"""
Implicit finite volume discretization of a vertical transport equation.

All prognostic equations of the model share the form

.. math::
    \rho \frac{\partial X}{\partial t} =
        \frac{\partial}{\partial z}\left(\mu \frac{\partial X}{\partial z}\right)
        + \frac{\partial (w_s X)}{\partial z}
        + \rho S - \rho D X

where :math:`\rho` is the capacity (density, or 1), :math:`\mu` the
diffusivity, :math:`w_s \ge 0` an optional downward settling velocity,
:math:`S` an explicit source and :math:`D \ge 0` a sink rate that is always
treated implicitly (Patankar).

The flux terms are integrated with the :math:`\theta` scheme. Each call
assembles one tridiagonal system over the active cells and solves it with a
banded direct solver.

.. note::
    Sign convention: the flux :math:`G = \mu \partial X/\partial z` is positive
    when it transports :math:`X` downwards.
"""
from .utility import *
from scipy.linalg import solve_banded


class BoundaryCondition(object):
    """
    Linear relation between the boundary flux and the adjacent cell value,
    :math:`G_b = a X + b`.

    Use the constructors :meth:`value`, :meth:`flux` and :meth:`drag`.
    """
    def __init__(self, kind, value=0.0, coefficient=0.0):
        self.kind = kind
        self.value = value
        self.coefficient = coefficient

    @classmethod
    def value(cls, value):
        """Dirichlet condition at the boundary face"""
        return cls('value', value=value)

    @classmethod
    def flux(cls, flux):
        """Prescribed flux into the domain"""
        return cls('flux', value=flux)

    @classmethod
    def drag(cls, coefficient):
        """Linear drag flux, :math:`\\text{flux out} = a X`"""
        return cls('drag', coefficient=coefficient)

    def __repr__(self):
        return 'BoundaryCondition({:}, value={:}, coefficient={:})'.format(
            self.kind, self.value, self.coefficient)


class VerticalEquation(object):
    """
    Base class of all column equations.

    Derived classes set :attr:`name` and compute the coefficients, and then
    call :meth:`solve_system`.
    """
    name = 'vertical equation'

    def __init__(self, mesh, theta=1.0):
        """
        :arg mesh: :class:`.VerticalMesh` object
        :kwarg float theta: implicitness parameter, 1.0 is fully implicit
        """
        self.mesh = mesh
        self.theta = theta
        self.iteration = 0

    def _boundary_coefficients(self, bc, conductance):
        """Return (a, b) such that flux out of the domain is a*X + b"""
        if bc.kind == 'value':
            return conductance, -conductance*bc.value
        if bc.kind == 'flux':
            return 0.0, -bc.value
        if bc.kind == 'drag':
            return bc.coefficient, 0.0
        raise ValueError('Unknown boundary condition type: ' + bc.kind)

    def assemble_operator(self, n, dz, diffusivity, bnd_conditions,
                          settling_velocity=None):
        """
        Assemble the linear flux operator :math:`R(X) = L X + r`.

        :arg int n: number of active cells
        :arg dz: cell thicknesses
        :arg diffusivity: cell centered diffusivity
        :arg dict bnd_conditions: :class:`BoundaryCondition` objects under
            keys ``'bottom'`` and ``'top'``
        :kwarg settling_velocity: cell centered downward velocity
        :returns: tuple ``(bands, r)``; ``bands`` is a (3, n) array in
            :func:`scipy.linalg.solve_banded` ordering
        """
        bands = numpy.zeros((3, n))
        upper = bands[0, 1:]
        diag = bands[1, :]
        lower = bands[2, :-1]
        r = numpy.zeros(n)

        # interior faces
        if n > 1:
            h_face = 0.5*(dz[:n - 1] + dz[1:n])
            mu_face = 0.5*(diffusivity[:n - 1] + diffusivity[1:n])
            g = mu_face/h_face
            diag[:n - 1] -= g
            upper += g
            diag[1:n] -= g
            lower += g
            if settling_velocity is not None:
                # upwind: settling flux through a face carries the upper cell value
                w = settling_velocity[1:n]
                upper += w
                diag[1:n] -= w

        # bottom boundary, flux out of the domain
        cond = diffusivity[0]/(0.5*dz[0])
        a, b = self._boundary_coefficients(bnd_conditions['bottom'], cond)
        diag[0] -= a
        r[0] -= b
        # top boundary
        cond = diffusivity[n - 1]/(0.5*dz[n - 1])
        a, b = self._boundary_coefficients(bnd_conditions['top'], cond)
        diag[n - 1] -= a
        r[n - 1] -= b
        return bands, r

    @staticmethod
    def apply_operator(bands, r, x):
        """Evaluate :math:`L x + r`"""
        y = bands[1]*x + r
        y[:-1] += bands[0, 1:]*x[1:]
        y[1:] += bands[2, :-1]*x[:-1]
        return y

    def solve_system(self, solution, n, dz, dt, capacity, diffusivity,
                     bnd_conditions, source=None, sink=None,
                     settling_velocity=None):
        """
        Advance the solution by one time step.

        Entries at and above ``n`` are not modified.

        :arg solution: solution array, updated in place
        :arg int n: number of active cells
        :arg dz: cell thicknesses
        :arg float dt: time step
        :arg capacity: :math:`\\rho` in the storage term
        :arg diffusivity: :math:`\\mu`
        :arg dict bnd_conditions: boundary conditions
        :kwarg source: explicit source :math:`S`
        :kwarg sink: implicit sink rate :math:`D`
        :kwarg settling_velocity: downward settling velocity
        :returns: the solution array
        """
        if not dt > 0.0:
            raise ModelConfigurationError('Time step must be positive, got {:}'.format(dt))
        theta = self.theta
        x_old = numpy.array(solution[:n], dtype=float)
        dz = dz[:n]
        diffusivity = numpy.broadcast_to(diffusivity, (n, )).astype(float)
        mass = numpy.broadcast_to(capacity, (n, ))*dz
        if numpy.any(diffusivity <= 0.0) or not numpy.all(numpy.isfinite(diffusivity)):
            ix = int(numpy.argmin(numpy.where(numpy.isfinite(diffusivity), diffusivity, -numpy.inf)))
            err = NumericalInstabilityError(self.iteration, self.name + ' diffusivity',
                                            diffusivity[ix], reason='non-positive or non-finite value')
            error(str(err))
            raise err

        bands, r = self.assemble_operator(n, dz, diffusivity, bnd_conditions,
                                          settling_velocity=settling_velocity)
        rhs = mass/dt*x_old + r
        if theta < 1.0:
            rhs += (1.0 - theta)*(self.apply_operator(bands, numpy.zeros(n), x_old))
        if source is not None:
            rhs += mass*numpy.broadcast_to(source, (n, ))
        matrix = -theta*bands
        matrix[1] += mass/dt
        if sink is not None:
            matrix[1] += mass*numpy.broadcast_to(sink, (n, ))

        try:
            x_new = solve_banded((1, 1), matrix, rhs)
        except (numpy.linalg.LinAlgError, ValueError) as e:
            error('{:}: tridiagonal solve failed: {:}'.format(self.name, e))
            raise NumericalInstabilityError(self.iteration, self.name,
                                            numpy.abs(matrix[1]).min(),
                                            reason='singular system') from e
        if not numpy.all(numpy.isfinite(x_new)):
            ix = int(numpy.argmin(numpy.isfinite(x_new)))
            err = NumericalInstabilityError(self.iteration, self.name, x_new[ix],
                                            reason='non-finite solution')
            error(str(err))
            raise err
        solution[:n] = x_new
        return solution
