"""
Timezone definitions and conversion methods
"""
import datetime
import pytz

epoch = datetime.datetime(1970, 1, 1, tzinfo=pytz.utc)


class FixedTimeZone(pytz._FixedOffset):
    """
    Class that represents a fixed time zone defined by UTC offset in hours.
    """
    def __init__(self, offset, name):
        """
        arg int offset: timezone UTC offset in hours
        arg str name: timezone name
        """
        self._offset_hours = offset
        offset_minutes = offset*60
        super(FixedTimeZone, self).__init__(offset_minutes)
        self.zone = name

    def tzname(self, dt):
        return self.zone

    def __repr__(self):
        return 'FixedTimeZone({:}, {:})'.format(self._offset_hours, self.zone)


#: Central European (standard) Time
timezone_cet = FixedTimeZone(1, 'CET')


def datetime_to_epoch(t):
    """
    Convert python datetime object to epoch time stamp.
    """
    return (t - epoch).total_seconds()


def epoch_to_datetime(t):
    """
    Convert epoch time stamp to python datetime object.
    """
    return epoch + datetime.timedelta(seconds=t)


def simulation_time_to_datetime(t, initial_date, tz=None):
    """
    Calendar date of elapsed simulation time ``t``.

    :arg float t: elapsed time in seconds
    :arg initial_date: timezone aware datetime of ``t=0``
    :kwarg tz: time zone of the returned date, defaults to that of
        ``initial_date``
    """
    if tz is None:
        tz = initial_date.tzinfo
    return epoch_to_datetime(datetime_to_epoch(initial_date) + t).astimezone(tz)
