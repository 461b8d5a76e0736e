# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import datetime
from functools import total_ordering
import re

from cqlcodec.marshal import INT64_MIN, INT64_MAX

DATETIME_EPOC = datetime.datetime(1970, 1, 1)
_EPOCH_ORDINAL = DATETIME_EPOC.toordinal()


def datetime_from_ms_timestamp(timestamp):
    """
    Creates a timezone-agnostic datetime from a timestamp in milliseconds.

    Raises an `OverflowError` if the timestamp is out of range for
    :class:`~datetime.datetime`.

    :param timestamp: timestamp, in milliseconds
    """
    return DATETIME_EPOC + datetime.timedelta(milliseconds=timestamp)


def ms_timestamp_from_datetime(dt):
    """
    Converts a datetime to a timestamp expressed in milliseconds. Aware
    datetimes are normalized to UTC first; naive ones are taken as UTC.

    :param dt: a :class:`datetime.datetime`
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    delta = dt - DATETIME_EPOC
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def days_from_civil(year, month, day):
    """
    Days since 1970-01-01 of a proleptic Gregorian date. Years use
    astronomical numbering: year 0 is 1 BC, year -1 is 2 BC.
    """
    if month <= 2:
        year -= 1
    era = year // 400
    yoe = year - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def civil_from_days(days):
    """
    Inverse of :func:`days_from_civil`; returns a ``(year, month, day)`` tuple.
    """
    days += 719468
    era = days // 146097
    doe = days - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400
    if month <= 2:
        year += 1
    return year, month, day


def _days_in_month(year, month):
    if month == 2:
        return 29 if (year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)) else 28
    return 30 if month in (4, 6, 9, 11) else 31


_date_string_regex = re.compile(r'^([+-]?\d+)-(\d{1,2})-(\d{1,2})$')


@total_ordering
class Date(object):
    '''
    Idealized date: year, month, day

    Offers a far wider year range than datetime.date: any day count is
    accepted, so every value of the CQL ``date`` type (and beyond) can be
    held. Years follow the proleptic Gregorian calendar with astronomical
    numbering. For Dates that cannot be represented as a datetime.date
    (because of datetime.MINYEAR, datetime.MAXYEAR), :meth:`date` raises
    ValueError.
    '''

    days_from_epoch = 0

    def __init__(self, value):
        """
        Initializer value can be:

        - integer_type: absolute days from epoch (1970, 1, 1). Can be negative.
        - datetime.date: built-in date
        - string_type: a string date of the form "[+-]yyyy-mm-dd"
        """
        if isinstance(value, bool):
            raise TypeError('Date arguments must be a whole number, datetime.date, or string')
        if isinstance(value, int):
            self.days_from_epoch = value
        elif isinstance(value, (datetime.date, datetime.datetime)):
            self.days_from_epoch = value.toordinal() - _EPOCH_ORDINAL
        elif isinstance(value, str):
            self._from_datestring(value)
        else:
            raise TypeError('Date arguments must be a whole number, datetime.date, or string')

    def _from_datestring(self, s):
        match = _date_string_regex.match(s.strip())
        if not match:
            raise ValueError("can't interpret %r as a date" % (s,))
        year, month, day = (int(g) for g in match.groups())
        self.days_from_epoch = Date.from_ymd(year, month, day).days_from_epoch

    @classmethod
    def from_ymd(cls, year, month, day):
        if not 1 <= month <= 12 or not 1 <= day <= _days_in_month(year, month):
            raise ValueError("%d-%d-%d is not a valid calendar date" % (year, month, day))
        return cls(days_from_civil(year, month, day))

    @property
    def year(self):
        return civil_from_days(self.days_from_epoch)[0]

    @property
    def month(self):
        return civil_from_days(self.days_from_epoch)[1]

    @property
    def day(self):
        return civil_from_days(self.days_from_epoch)[2]

    def date(self):
        """
        Return a built-in datetime.date for Dates falling in the years [datetime.MINYEAR, datetime.MAXYEAR]

        ValueError is raised for Dates outside this range.
        """
        year, month, day = civil_from_days(self.days_from_epoch)
        if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
            raise ValueError("%r exceeds ranges for built-in datetime.date" % self)
        return datetime.date(year, month, day)

    def __hash__(self):
        return self.days_from_epoch

    def __eq__(self, other):
        if isinstance(other, Date):
            return self.days_from_epoch == other.days_from_epoch

        if isinstance(other, datetime.date) and not isinstance(other, datetime.datetime):
            return self.days_from_epoch == Date(other).days_from_epoch

        return NotImplemented

    def __lt__(self, other):
        if not isinstance(other, Date):
            return NotImplemented
        return self.days_from_epoch < other.days_from_epoch

    def __repr__(self):
        return "Date(%s)" % self.days_from_epoch

    def __str__(self):
        year, month, day = civil_from_days(self.days_from_epoch)
        sign = '-' if year < 0 else ''
        return "%s%04d-%02d-%02d" % (sign, abs(year), month, day)


@total_ordering
class Counter(object):
    """
    The value of a CQL ``counter`` column: a signed 64-bit integer.

    Counters cannot be written directly. A Counter passed as a query
    parameter is always the delta of an increment
    (``UPDATE ... SET c = c + ?``); see
    :meth:`cqlcodec.serializer.ValueSerializer.serialize_increment`.
    """

    __slots__ = ('_value',)

    def __init__(self, value=0):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('Counter values must be integers, got %r' % (value,))
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError('Counter value %d does not fit in a signed 64-bit integer' % value)
        self._value = value

    @property
    def value(self):
        return self._value

    def __int__(self):
        return self._value

    __index__ = __int__

    def __hash__(self):
        return hash((Counter, self._value))

    def __eq__(self, other):
        if isinstance(other, Counter):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other):
        if not isinstance(other, Counter):
            return NotImplemented
        return self._value < other._value

    def __repr__(self):
        return "Counter(%d)" % self._value
