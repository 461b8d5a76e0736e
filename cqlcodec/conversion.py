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
These functions are used to convert decoded :class:`~cqlcodec.values.CQLValue`
instances into native Python objects. When result rows are read through a
:class:`~cqlcodec.rows.TypedRowSequence`, a converter is called on each
column.
"""

import datetime
from decimal import Decimal
import logging
from uuid import UUID

from cqlcodec import TypeMismatchError
from cqlcodec.util import Counter, Date, datetime_from_ms_timestamp
from cqlcodec.values import (CQLValue, NullValue, AsciiValue, BigintValue, BlobValue,
                             BooleanValue, CounterValue, DateValue, DecimalValue, DoubleValue,
                             FloatValue, Int32Value, SmallintValue, TextValue, TimestampValue,
                             TimeUUIDValue, TinyintValue, UUIDValue, VarintValue)

log = logging.getLogger(__name__)

_integer_values = (VarintValue, BigintValue, Int32Value, SmallintValue, TinyintValue)


def _type_name(target_type):
    return getattr(target_type, '__name__', repr(target_type))


def _expect(value, target_type, value_classes):
    if not isinstance(value, value_classes):
        raise TypeMismatchError(_type_name(target_type), value.typename)


class Converter(object):
    """
    A container for mapping native python types to the functions that build
    them from decoded values. The type :attr:`~.Converter.mapping` can be
    directly customized by users.

    A :class:`~cqlcodec.values.NullValue` converts to :const:`None` whatever
    the target type.
    """

    mapping = None
    """
    A map of python types to converter functions. Each function takes a
    :class:`~cqlcodec.values.CQLValue` and returns the native value, raising
    :class:`~cqlcodec.TypeMismatchError` for values it does not accept.
    """

    def __init__(self):
        self.mapping = {
            bool: self.convert_bool,
            int: self.convert_int,
            float: self.convert_float,
            Decimal: self.convert_decimal,
            str: self.convert_str,
            bytes: self.convert_bytes,
            UUID: self.convert_uuid,
            Counter: self.convert_counter,
            Date: self.convert_date_ext,
            datetime.date: self.convert_date,
            datetime.datetime: self.convert_datetime,
        }

    def convert(self, target_type, value):
        """
        Convert `value` to an instance of `target_type`.
        """
        if not isinstance(value, CQLValue):
            raise TypeError("Expected a decoded CQL value, got %r" % (value,))
        if isinstance(value, NullValue):
            return None
        try:
            converter = self.mapping[target_type]
        except KeyError:
            raise TypeMismatchError(_type_name(target_type), value.typename)
        return converter(value)

    def to_native(self, value):
        """
        Convert `value` to the default native type of its CQL type, e.g.
        :class:`int` for all integer types and :class:`~cqlcodec.util.Date`
        for ``date``.
        """
        if not isinstance(value, CQLValue):
            raise TypeError("Expected a decoded CQL value, got %r" % (value,))
        if isinstance(value, NullValue):
            return None
        return self.convert(_default_types[type(value)], value)

    def convert_bool(self, val):
        _expect(val, bool, BooleanValue)
        return val.value

    def convert_int(self, val):
        """
        Any of the integer types. Counters are not integers here; they
        only convert to :class:`~cqlcodec.util.Counter`.
        """
        _expect(val, int, _integer_values)
        return val.value

    def convert_float(self, val):
        _expect(val, float, (FloatValue, DoubleValue))
        return val.value

    def convert_decimal(self, val):
        _expect(val, Decimal, DecimalValue)
        return Decimal('%de%d' % (val.unscaled, -val.scale))

    def convert_str(self, val):
        _expect(val, str, (TextValue, AsciiValue))
        return val.value

    def convert_bytes(self, val):
        _expect(val, bytes, BlobValue)
        return val.value

    def convert_uuid(self, val):
        _expect(val, UUID, (UUIDValue, TimeUUIDValue))
        return val.value

    def convert_counter(self, val):
        _expect(val, Counter, CounterValue)
        return Counter(val.value)

    def convert_date_ext(self, val):
        """
        :class:`~cqlcodec.util.Date` holds every value of the ``date`` type.
        """
        _expect(val, Date, DateValue)
        return Date(val.days_from_epoch)

    def convert_date(self, val):
        """
        Dates outside ``datetime.date.min`` .. ``datetime.date.max`` are valid
        on the wire but have no :class:`datetime.date`; they convert to
        :const:`None`.
        """
        _expect(val, datetime.date, DateValue)
        try:
            return Date(val.days_from_epoch).date()
        except ValueError:
            log.debug("Date offset %d is not representable as datetime.date", val.offset)
            return None

    def convert_datetime(self, val):
        """
        Like :meth:`convert_date`, timestamps beyond the range of
        :class:`datetime.datetime` convert to :const:`None`.
        """
        _expect(val, datetime.datetime, TimestampValue)
        try:
            return datetime_from_ms_timestamp(val.millis)
        except OverflowError:
            log.debug("Timestamp %d is not representable as datetime.datetime", val.millis)
            return None


_default_types = {
    AsciiValue: str,
    BigintValue: int,
    BlobValue: bytes,
    BooleanValue: bool,
    CounterValue: Counter,
    DateValue: Date,
    DecimalValue: Decimal,
    DoubleValue: float,
    FloatValue: float,
    Int32Value: int,
    SmallintValue: int,
    TextValue: str,
    TimestampValue: datetime.datetime,
    TimeUUIDValue: UUID,
    TinyintValue: int,
    UUIDValue: UUID,
    VarintValue: int,
}

default_converter = Converter()


def convert(target_type, value):
    """
    Convert a decoded value with the default :class:`Converter`.
    """
    return default_converter.convert(target_type, value)


def to_native(value):
    return default_converter.to_native(value)
