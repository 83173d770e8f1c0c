"""
Utility functions and classes for the 1DV column model
"""
import os
import sys
from collections import OrderedDict  # NOQA

import numpy
from functools import wraps

from .field_defs import field_metadata
from .log import *
from .physical_constants import physical_constants


class FrozenClass(object):
    """
    A class where creating a new attribute will raise an exception if
    :attr:`_isfrozen` is ``True``.

    :attr:`_unfreezedepth` allows for multiple applications of the
    ``unfrozen`` decorator.
    """
    _isfrozen = False
    _unfreezedepth = 0

    def __setattr__(self, key, value):
        if self._isfrozen and not hasattr(self, key):
            raise TypeError('Adding new attribute "{:}" to {:} class is forbidden'.format(key, self.__class__.__name__))
        super(FrozenClass, self).__setattr__(key, value)


def unfrozen(method):
    """
    Decorator to temporarily unfreeze an object
    whilst one of its methods is being called.
    """
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        self._isfrozen = False
        self._unfreezedepth += 1
        ret = method(self, *args, **kwargs)
        self._unfreezedepth -= 1
        self._isfrozen = self._unfreezedepth == 0
        return ret

    return wrapper


class ModelConfigurationError(ValueError):
    """Raised when the model set-up violates a precondition"""
    pass


class NumericalInstabilityError(ArithmeticError):
    """
    Raised when the time integration produces an invalid state.

    :arg int iteration: time step index where the failure was detected
    :arg str field_name: name of the offending field
    :arg value: offending value
    :kwarg str reason: short description of the failure
    """
    def __init__(self, iteration, field_name, value, reason='invalid value'):
        self.iteration = iteration
        self.field_name = field_name
        self.value = value
        msg = 'Step {:}: {:} in field "{:}": {:}'.format(iteration, reason, field_name, value)
        super(NumericalInstabilityError, self).__init__(msg)


class AttrDict(dict):
    """
    Dictionary that provides both self['key'] and self.key access to members.

    http://stackoverflow.com/questions/4984647/accessing-dict-keys-like-an-attribute-in-python
    """
    def __init__(self, *args, **kwargs):
        super(AttrDict, self).__init__(*args, **kwargs)
        self.__dict__ = self


class FieldDict(AttrDict):
    """
    AttrDict that checks that all added fields have proper meta data.

    Values must be one dimensional numpy arrays.
    """
    def _check_inputs(self, key, value):
        if key != '__dict__':
            if not isinstance(value, numpy.ndarray) or value.ndim != 1:
                raise TypeError('Value must be a one dimensional numpy array')
            if key not in field_metadata:
                msg = 'Trying to add a field "{:}" that has no metadata. ' \
                      'Add field_metadata entry to field_defs.py'.format(key)
                raise Exception(msg)

    def __setitem__(self, key, value):
        self._check_inputs(key, value)
        super(FieldDict, self).__setitem__(key, value)

    def __setattr__(self, key, value):
        self._check_inputs(key, value)
        super(FieldDict, self).__setattr__(key, value)


def create_directory(path):
    """
    Create a directory on disk

    Raises IOError if a file with the same name already exists.
    """
    if os.path.exists(path):
        if not os.path.isdir(path):
            raise IOError('file with same name exists', path)
    else:
        os.makedirs(path)
    return path


def set_func_min_val(f, minval):
    """
    Sets a minimum value to an array, in place
    """
    f[f < minval] = minval


def vertical_gradient(f, z, n):
    r"""
    Vertical derivative of a cell centered field on a non-uniform grid.

    Central differences over the two neighboring cell centers are used in the
    interior, one-sided differences at the bottom and top cells:

    .. math::
        \left.\frac{\partial f}{\partial z}\right|_i =
            \frac{f_{i+1} - f_{i-1}}{z_{i+1} - z_{i-1}}

    The result is exact for linear fields on any grid.

    :arg f: field values, at least ``n`` entries
    :arg z: cell center coordinates, at least ``n`` entries
    :arg int n: number of active cells
    :returns: array of length ``len(f)``; entries ``n`` and above are zero
    """
    grad = numpy.zeros(len(f))
    if n < 2:
        return grad
    f = numpy.asarray(f, dtype=float)
    z = numpy.asarray(z, dtype=float)
    grad[0] = (f[1] - f[0])/(z[1] - z[0])
    grad[n - 1] = (f[n - 1] - f[n - 2])/(z[n - 1] - z[n - 2])
    if n > 2:
        grad[1:n - 1] = (f[2:n] - f[:n - 2])/(z[2:n] - z[:n - 2])
    return grad


def comp_column_mass(c, dz, n):
    """
    Integral of a cell centered field over the active cells

    :arg c: field values
    :arg dz: cell thicknesses
    :arg int n: number of active cells
    """
    return float(numpy.sum(c[:n]*dz[:n]))


def print_field_value_range(f, n, name=None, prefix=None, format='7.5g'):
    """
    Prints the min/max DOF values of the active part of a field.

    :arg f: field values
    :arg int n: number of active cells
    :kwarg name: name of the field
    :kwarg str prefix: additional string to print before the output
    :kwarg str format: format string for the values
    """
    minval = f[:n].min()
    maxval = f[:n].max()
    fmt = '{:} {:} range: {:' + format + '} ... {:' + format + '}'
    print_output(fmt.format(prefix or '', name or 'field', minval, maxval))
