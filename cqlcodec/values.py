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

"""
Decoded CQL values. Each class below is one case of a closed set: a decoded
cell is always an instance of exactly one of them, carrying the raw payload
of its CQL type (the unscaled integer and scale of a decimal, the unsigned
day offset of a date, ...). Turning these into application types is the job
of :mod:`cqlcodec.conversion`.

Two values are equal only if they are of the same class and carry the same
payload, so ``Int32Value(1) != BooleanValue(True)``.
"""


class CQLValue(object):
    """
    Base of all decoded values. Not instantiated directly.
    """

    __slots__ = ()

    typename = None
    """
    The CQL name of the type the value was decoded as.
    """

    def __init__(self, *args):
        if len(args) != len(self.__slots__):
            raise TypeError("%s takes %d argument(s) (%d given)"
                            % (self.__class__.__name__, len(self.__slots__), len(args)))
        for name, arg in zip(self.__slots__, args):
            object.__setattr__(self, name, arg)

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % self.__class__.__name__)

    def _payload(self):
        return tuple(getattr(self, name) for name in self.__slots__)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._payload() == other._payload()

    def __hash__(self):
        return hash((self.__class__, self._payload()))

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__,
                           ', '.join('%s=%r' % (name, getattr(self, name)) for name in self.__slots__))


class NullValue(CQLValue):
    """
    A null cell. `declared_type` is the CQL name of the column's type.
    """
    __slots__ = ('declared_type',)
    typename = 'null'


class AsciiValue(CQLValue):
    __slots__ = ('value',)
    typename = 'ascii'


class BigintValue(CQLValue):
    __slots__ = ('value',)
    typename = 'bigint'


class BlobValue(CQLValue):
    __slots__ = ('value',)
    typename = 'blob'


class BooleanValue(CQLValue):
    __slots__ = ('value',)
    typename = 'boolean'


class CounterValue(CQLValue):
    __slots__ = ('value',)
    typename = 'counter'


class DateValue(CQLValue):
    """
    `offset` is the unsigned wire value: days since 1970-01-01 plus 2**31.
    """
    __slots__ = ('offset',)
    typename = 'date'

    EPOCH_OFFSET_DAYS = 2 ** 31

    @property
    def days_from_epoch(self):
        return self.offset - self.EPOCH_OFFSET_DAYS


class DecimalValue(CQLValue):
    """
    ``unscaled * 10 ** -scale``. The pair is kept exactly as it was on the
    wire, so ``Decimal('4.20')`` and ``Decimal('4.2')`` stay distinct.
    """
    __slots__ = ('unscaled', 'scale')
    typename = 'decimal'


class DoubleValue(CQLValue):
    __slots__ = ('value',)
    typename = 'double'


class FloatValue(CQLValue):
    __slots__ = ('value',)
    typename = 'float'


class Int32Value(CQLValue):
    __slots__ = ('value',)
    typename = 'int'


class SmallintValue(CQLValue):
    __slots__ = ('value',)
    typename = 'smallint'


class TextValue(CQLValue):
    __slots__ = ('value',)
    typename = 'text'


class TimestampValue(CQLValue):
    """
    `millis` is the signed number of milliseconds since the epoch (UTC).
    """
    __slots__ = ('millis',)
    typename = 'timestamp'


class TimeUUIDValue(CQLValue):
    __slots__ = ('value',)
    typename = 'timeuuid'


class TinyintValue(CQLValue):
    __slots__ = ('value',)
    typename = 'tinyint'


class UUIDValue(CQLValue):
    __slots__ = ('value',)
    typename = 'uuid'


class VarintValue(CQLValue):
    __slots__ = ('value',)
    typename = 'varint'
