"""
Utility function and extensions to traitlets used for specifying mudcolumn options
"""
import datetime
from traitlets.config.configurable import Configurable
from traitlets import *  # NOQA
from traitlets import (Bool, Enum, Float, HasTraits, Instance, Integer,  # NOQA
                       List, TraitType, Undefined, Unicode)


class PositiveInteger(Integer):
    def info(self):
        return u'a positive integer'

    def validate(self, obj, proposal):
        super(PositiveInteger, self).validate(obj, proposal)
        if proposal <= 0:
            self.error(obj, proposal)
        return proposal


class PositiveFloat(Float):
    def info(self):
        return u'a positive float'

    def validate(self, obj, proposal):
        super(PositiveFloat, self).validate(obj, proposal)
        if proposal <= 0.0:
            self.error(obj, proposal)
        return proposal


class NonNegativeFloat(Float):
    def info(self):
        return u'a non-negative float'

    def validate(self, obj, proposal):
        super(NonNegativeFloat, self).validate(obj, proposal)
        if proposal < 0.0:
            self.error(obj, proposal)
        return proposal


class BoundedFloat(Float):
    def __init__(self, default_value=Undefined, bounds=None, **kwargs):
        self.minval = bounds[0]
        self.maxval = bounds[1]
        super(BoundedFloat, self).__init__(default_value, **kwargs)

    def info(self):
        return u'a float between {:} and {:}'.format(self.minval, self.maxval)

    def validate(self, obj, proposal):
        super(BoundedFloat, self).validate(obj, proposal)
        if proposal < self.minval or proposal > self.maxval:
            self.error(obj, proposal)
        return proposal


class DatetimeWithTimezone(TraitType):
    """A timezone aware :class:`datetime.datetime` object"""
    default_value = None
    info_text = 'a datetime object with timezone information'

    def validate(self, obj, value):
        if value is None and self.allow_none:
            return value
        if isinstance(value, datetime.datetime) and value.tzinfo is not None:
            return value
        self.error(obj, value)

    def default_value_repr(self):
        return repr(self.default_value)


class FrozenHasTraits(HasTraits):
    """
    A HasTraits class that only allows adding new attributes in the class
    definition or when  self._isfrozen is False.
    """
    _isfrozen = False

    def __init__(self, *args, **kwargs):
        super(FrozenHasTraits, self).__init__(*args, **kwargs)
        self._isfrozen = True

    def __setattr__(self, key, value):
        if self._isfrozen and not hasattr(self, key):
            raise TypeError('Adding new attribute "{:}" to {:} class is forbidden'.format(key, self.__class__.__name__))
        super(FrozenHasTraits, self).__setattr__(key, value)

    def update(self, source):
        """Set multiple traits from a dict"""
        for key in source:
            self.__setattr__(key, source[key])

    def __str__(self):
        lines = [self.name]
        for key in sorted(self.trait_names(config=True)):
            lines.append('  {:}: {:}'.format(key, getattr(self, key)))
        return '\n'.join(lines)


class FrozenConfigurable(Configurable):
    """
    A Configurable class that only allows adding new attributes in the class
    definition or when  self._isfrozen is False.
    """
    _isfrozen = False

    def __init__(self, *args, **kwargs):
        super(FrozenConfigurable, self).__init__(*args, **kwargs)
        self._isfrozen = True

    def __setattr__(self, key, value):
        if self._isfrozen and not hasattr(self, key):
            raise TypeError('Adding new attribute "{:}" to {:} class is forbidden'.format(key, self.__class__.__name__))
        super(FrozenConfigurable, self).__setattr__(key, value)

    def update(self, source):
        if isinstance(source, dict):
            for key in source:
                self.__setattr__(key, source[key])
        else:
            self.add_traits(**source.traits())

    def __str__(self):
        lines = [self.name]
        for key in sorted(self.trait_names(config=True)):
            value = getattr(self, key)
            if isinstance(value, FrozenHasTraits):
                sub = str(value).split('\n')
                lines.append('  ' + key + ': ' + sub[0])
                lines.extend('    ' + s.strip() for s in sub[1:])
            else:
                lines.append('  {:}: {:}'.format(key, value))
        return '\n'.join(lines)
