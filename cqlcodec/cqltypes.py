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
Representation of CQL data types. Each class here is the codec for one CQL
scalar type: :meth:`~.CassandraType.serialize` turns a native Python value
into the type's wire payload and :meth:`~.CassandraType.from_binary` turns a
payload back into a :class:`~cqlcodec.values.CQLValue`. The classes are used
directly, never instantiated; they double as the type tags handed to
:mod:`cqlcodec.decoder` and :mod:`cqlcodec.serializer`.
"""

import datetime
from decimal import Decimal
import logging
from uuid import UUID

from cqlcodec import FormatError, UnsupportedTypeError, type_codes
from cqlcodec.marshal import (int8_pack, int8_unpack, int16_pack, int16_unpack,
                              uint32_pack, uint32_unpack, int32_pack, int32_unpack,
                              int64_pack, int64_unpack, float_pack, float_unpack,
                              double_pack, double_unpack, varint_pack, varint_unpack,
                              INT64_MIN, INT64_MAX)
from cqlcodec import util
from cqlcodec.values import (NullValue, AsciiValue, BigintValue, BlobValue, BooleanValue,
                             CounterValue, DateValue, DecimalValue, DoubleValue, FloatValue,
                             Int32Value, SmallintValue, TextValue, TimestampValue,
                             TimeUUIDValue, TinyintValue, UUIDValue, VarintValue)

apache_cassandra_type_prefix = 'org.apache.cassandra.db.marshal.'

log = logging.getLogger(__name__)


def trim_if_startswith(s, prefix):
    if s.startswith(prefix):
        return s[len(prefix):]
    return s


_casstypes = {}
_cqltypes = {}


class CassandraTypeType(type):
    """
    This metaclass registers CassandraType classes in the global
    by-cassandra-typename and by-cql-typename registries, unless their class
    name starts with an underscore.
    """

    def __new__(metacls, name, bases, dct):
        dct.setdefault('cassname', name)
        cls = type.__new__(metacls, name, bases, dct)
        if not name.startswith('_'):
            _casstypes[name] = cls
            _cqltypes[cls.typename] = cls
        return cls


class _CassandraType(object, metaclass=CassandraTypeType):
    typename = None

    fixed_length = None
    """
    Exact payload size for fixed-width types, :const:`None` for
    variable-width ones.
    """

    empty_binary_ok = False
    """
    Whether a zero-length payload is a real value of this type. For other
    types an empty payload is read as null, the way Thrift-era clients wrote
    nulls.
    """

    @classmethod
    def from_binary(cls, byts):
        """
        Deserialize a payload into a :class:`~cqlcodec.values.CQLValue`.
        :const:`None` and, for types that do not allow it, the empty string
        give a :class:`~cqlcodec.values.NullValue`.
        """
        if byts is None:
            return NullValue(cls.typename)
        elif len(byts) == 0 and not cls.empty_binary_ok:
            return NullValue(cls.typename)
        if cls.fixed_length is not None and len(byts) != cls.fixed_length:
            raise FormatError(cls.typename, cls.fixed_length, len(byts))
        return cls.deserialize(byts)

    @staticmethod
    def deserialize(byts):
        """
        Given a payload of the right size, decode it according to the protocol
        for this type.
        """
        raise NotImplementedError()

    @staticmethod
    def serialize(val):
        """
        Given a native value appropriate for this type, serialize it according
        to the protocol for this type and return the payload bytes.
        """
        raise NotImplementedError()

    @classmethod
    def cass_parameterized_type(cls, full=False):
        """
        Return the name of this type as the server's marshal class,
        optionally fully qualified.
        """
        if full:
            return apache_cassandra_type_prefix + cls.cassname
        return cls.cassname


# it's initially named with a _ to avoid registering it as a real type, but
# client programs may want to use the name still for isinstance(), etc
CassandraType = _CassandraType


def _check_integer(val, typename):
    if isinstance(val, bool) or not isinstance(val, int):
        raise TypeError("Received a non-integer value %r for a %s" % (val, typename))


class BytesType(_CassandraType):
    typename = 'blob'
    empty_binary_ok = True

    @staticmethod
    def deserialize(byts):
        return BlobValue(bytes(byts))

    @staticmethod
    def serialize(val):
        if not isinstance(val, (bytes, bytearray, memoryview)):
            raise TypeError("Received a non-bytes value %r for a blob" % (val,))
        return bytes(val)


class DecimalType(_CassandraType):
    typename = 'decimal'

    @staticmethod
    def deserialize(byts):
        if len(byts) < 5:
            raise FormatError(DecimalType.typename, 'at least 5', len(byts))
        scale = int32_unpack(byts[:4])
        unscaled = varint_unpack(byts[4:])
        return DecimalValue(unscaled, scale)

    @staticmethod
    def serialize(dec):
        if isinstance(dec, bool):
            raise TypeError("Invalid type for Decimal value: %r" % (dec,))
        try:
            sign, digits, exponent = dec.as_tuple()
        except AttributeError:
            try:
                dec = Decimal(dec)
            except Exception:
                raise TypeError("Invalid type for Decimal value: %r" % (dec,))
            sign, digits, exponent = dec.as_tuple()
        if not dec.is_finite():
            raise ValueError("Cannot serialize non-finite Decimal value %r" % (dec,))
        unscaled = int(''.join([str(digit) for digit in digits]))
        if sign:
            unscaled *= -1
        scale = -exponent
        if not -2 ** 31 <= scale < 2 ** 31:
            raise ValueError("Decimal scale %d of %r does not fit in a signed 32-bit integer" % (scale, dec))
        return int32_pack(scale) + varint_pack(unscaled)


class UUIDType(_CassandraType):
    typename = 'uuid'
    fixed_length = 16

    @staticmethod
    def deserialize(byts):
        return UUIDValue(UUID(bytes=bytes(byts)))

    @staticmethod
    def serialize(uuid):
        try:
            return uuid.bytes
        except AttributeError:
            raise TypeError("Got a non-UUID object for a UUID value")


class BooleanType(_CassandraType):
    typename = 'boolean'
    fixed_length = 1

    @staticmethod
    def deserialize(byts):
        return BooleanValue(int8_unpack(byts) != 0)

    @staticmethod
    def serialize(truth):
        return b'\x01' if truth else b'\x00'


class ByteType(_CassandraType):
    typename = 'tinyint'
    fixed_length = 1

    @staticmethod
    def deserialize(byts):
        return TinyintValue(int8_unpack(byts))

    @staticmethod
    def serialize(val):
        _check_integer(val, ByteType.typename)
        return int8_pack(val)


class AsciiType(_CassandraType):
    typename = 'ascii'
    empty_binary_ok = True

    @staticmethod
    def deserialize(byts):
        return AsciiValue(bytes(byts).decode('ascii'))

    @staticmethod
    def serialize(var):
        if isinstance(var, bytes):
            var.decode('ascii')
            return var
        try:
            return var.encode('ascii')
        except AttributeError:
            raise TypeError("Received a non-string value %r for an ascii" % (var,))


class FloatType(_CassandraType):
    typename = 'float'
    fixed_length = 4

    @staticmethod
    def deserialize(byts):
        return FloatValue(float_unpack(byts))

    @staticmethod
    def serialize(val):
        try:
            return float_pack(val)
        except OverflowError:
            raise ValueError("%r is outside the range of a 32-bit float" % (val,))


class DoubleType(_CassandraType):
    typename = 'double'
    fixed_length = 8

    @staticmethod
    def deserialize(byts):
        return DoubleValue(double_unpack(byts))

    @staticmethod
    def serialize(val):
        return double_pack(val)


class LongType(_CassandraType):
    typename = 'bigint'
    fixed_length = 8

    @staticmethod
    def deserialize(byts):
        return BigintValue(int64_unpack(byts))

    @staticmethod
    def serialize(val):
        _check_integer(val, LongType.typename)
        return int64_pack(val)


class Int32Type(_CassandraType):
    typename = 'int'
    fixed_length = 4

    @staticmethod
    def deserialize(byts):
        return Int32Value(int32_unpack(byts))

    @staticmethod
    def serialize(val):
        _check_integer(val, Int32Type.typename)
        return int32_pack(val)


class IntegerType(_CassandraType):
    typename = 'varint'

    @staticmethod
    def deserialize(byts):
        return VarintValue(varint_unpack(byts))

    @staticmethod
    def serialize(val):
        _check_integer(val, IntegerType.typename)
        return varint_pack(val)


class CounterColumnType(LongType):
    """
    Counters share the ``bigint`` layout but are never written as values:
    the server only accepts a delta applied by an increment. :meth:`serialize`
    therefore refuses every value; :meth:`serialize_increment` is the only
    encoding path.
    """
    typename = 'counter'

    @staticmethod
    def deserialize(byts):
        return CounterValue(int64_unpack(byts))

    @staticmethod
    def serialize(val):
        raise TypeError("counter columns cannot be set to a value; bind an increment "
                        "with ValueSerializer.serialize_increment() instead")

    @staticmethod
    def serialize_increment(delta):
        """
        Serialize the delta of ``counter = counter + ?``. `delta` is a
        :class:`~cqlcodec.util.Counter` or a plain integer.
        """
        if isinstance(delta, util.Counter):
            delta = delta.value
        _check_integer(delta, CounterColumnType.typename)
        if not INT64_MIN <= delta <= INT64_MAX:
            raise ValueError("Counter increment %d does not fit in a signed 64-bit integer" % delta)
        return int64_pack(delta)


class DateType(_CassandraType):
    typename = 'timestamp'
    fixed_length = 8

    @staticmethod
    def deserialize(byts):
        return TimestampValue(int64_unpack(byts))

    @staticmethod
    def serialize(v):
        if isinstance(v, datetime.datetime):
            timestamp = util.ms_timestamp_from_datetime(v)
        elif isinstance(v, datetime.date):
            timestamp = util.ms_timestamp_from_datetime(datetime.datetime(v.year, v.month, v.day))
        elif isinstance(v, (int, float)) and not isinstance(v, bool):
            # Ints and floats are valid timestamps too, in milliseconds
            try:
                timestamp = int(v)
            except (OverflowError, ValueError):
                raise ValueError("%r is not a finite timestamp" % (v,))
        else:
            raise TypeError('DateType arguments must be a datetime, date, or timestamp')
        return int64_pack(timestamp)


class TimestampType(DateType):
    pass


class TimeUUIDType(UUIDType):
    typename = 'timeuuid'

    @staticmethod
    def deserialize(byts):
        return TimeUUIDValue(UUID(bytes=bytes(byts)))

    @staticmethod
    def serialize(timeuuid):
        try:
            if timeuuid.version != 1:
                raise ValueError("%s is not a version 1 (time based) UUID" % (timeuuid,))
            return timeuuid.bytes
        except AttributeError:
            raise TypeError("Got a non-UUID object for a UUID value")


class SimpleDateType(_CassandraType):
    typename = 'date'
    fixed_length = 4

    # Values of the 'date' type are encoded as 32-bit unsigned integers
    # representing a number of days with epoch (January 1st, 1970) at the center of the
    # range (2^31).
    EPOCH_OFFSET_DAYS = 2 ** 31

    MIN_DAYS = -EPOCH_OFFSET_DAYS
    MAX_DAYS = 2 ** 32 - 1 - EPOCH_OFFSET_DAYS

    @staticmethod
    def deserialize(byts):
        return DateValue(uint32_unpack(byts))

    @staticmethod
    def serialize(val):
        try:
            days = val.days_from_epoch
        except AttributeError:
            if isinstance(val, int) and not isinstance(val, bool):
                # the DB wants offset int values, but util.Date init takes days from epoch
                # here we assume int values are offset, as they would appear in CQL
                if not 0 <= val < 2 ** 32:
                    raise ValueError("Raw date value %d is outside the unsigned 32-bit range" % val)
                return uint32_pack(val)
            days = util.Date(val).days_from_epoch
        if not SimpleDateType.MIN_DAYS <= days <= SimpleDateType.MAX_DAYS:
            raise ValueError("Date %s is outside the range of the CQL date type" % (util.Date(days),))
        return uint32_pack(days + SimpleDateType.EPOCH_OFFSET_DAYS)


class ShortType(_CassandraType):
    typename = 'smallint'
    fixed_length = 2

    @staticmethod
    def deserialize(byts):
        return SmallintValue(int16_unpack(byts))

    @staticmethod
    def serialize(val):
        _check_integer(val, ShortType.typename)
        return int16_pack(val)


class UTF8Type(_CassandraType):
    typename = 'text'
    empty_binary_ok = True

    @staticmethod
    def deserialize(byts):
        return TextValue(bytes(byts).decode('utf8'))

    @staticmethod
    def serialize(ustr):
        if isinstance(ustr, bytes):
            # already utf-8
            ustr.decode('utf8')
            return ustr
        try:
            return ustr.encode('utf-8')
        except AttributeError:
            raise TypeError("Received a non-string value %r for a text" % (ustr,))


class VarcharType(UTF8Type):
    typename = 'varchar'


# timestamp is the registered CQL name of DateType; the TimestampType alias
# must not shadow it
_cqltypes['timestamp'] = DateType

_cqltypes_by_code = dict((code, _casstypes[name]) for name, code in vars(type_codes).items()
                         if name in _casstypes)


def lookup_cqltype(cql_type):
    """
    Resolve a type tag to its codec class. The tag may be given as

    - a codec class, returned as is
    - a CQL type name (``'int'``, ``'varint'``)
    - a server marshal class name, short or fully qualified
      (``'Int32Type'``, ``'org.apache.cassandra.db.marshal.Int32Type'``)
    - a protocol type code (``0x0009``)

    :class:`~cqlcodec.UnsupportedTypeError` is raised for anything else.

    Example:

        >>> lookup_cqltype('org.apache.cassandra.db.marshal.DecimalType')
        <class 'cqlcodec.cqltypes.DecimalType'>

    """
    if isinstance(cql_type, CassandraTypeType):
        if cql_type.cassname in _casstypes:
            return cql_type
        raise UnsupportedTypeError(cql_type)
    if isinstance(cql_type, int) and not isinstance(cql_type, bool):
        try:
            return _cqltypes_by_code[cql_type]
        except KeyError:
            raise UnsupportedTypeError(cql_type)
    if isinstance(cql_type, str):
        name = cql_type.strip()
        try:
            return _cqltypes[name.lower()]
        except KeyError:
            pass
        try:
            return _casstypes[trim_if_startswith(name, apache_cassandra_type_prefix)]
        except KeyError:
            pass
    raise UnsupportedTypeError(cql_type)
