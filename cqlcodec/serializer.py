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
This module turns native Python values into framed wire cells, ready to be
placed in the parameter list of an ``EXECUTE`` or ``QUERY`` message.
"""

import logging
import struct

from cqlcodec import ProtocolVersion
from cqlcodec.cqltypes import lookup_cqltype, CounterColumnType
from cqlcodec.marshal import int32_pack
from cqlcodec.protocol import _UNSET_VALUE
from cqlcodec.util import Counter

log = logging.getLogger(__name__)

UNSET_VALUE = _UNSET_VALUE
"""
Specifies an unset value when binding parameters.

Unset values are ignored by the server, allowing statements to be executed
without specifying every parameter.

Only valid when using native protocol v4+
"""

_NULL_CELL = int32_pack(-1)
_UNSET_CELL = int32_pack(-2)


def _frame(payload):
    return int32_pack(len(payload)) + payload


class ValueSerializer(object):
    """
    Serializes native values for the declared CQL type of their parameter.

    Counter columns are deliberately absent from :meth:`serialize`: the
    server only accepts a counter delta through ``SET c = c + ?``, so
    counters go through :meth:`serialize_increment`.
    """

    protocol_version = ProtocolVersion.DEFAULT
    """
    The native protocol version the cells are produced for. It decides
    whether :data:`UNSET_VALUE` may be sent.
    """

    def __init__(self, protocol_version=ProtocolVersion.DEFAULT):
        if protocol_version not in ProtocolVersion.SUPPORTED_VERSIONS:
            raise ValueError("Unsupported protocol version %r (supported: %s)"
                             % (protocol_version, ProtocolVersion.SUPPORTED_VERSIONS))
        self.protocol_version = protocol_version

    def _unset_cell(self):
        if not ProtocolVersion.uses_unset_values(self.protocol_version):
            raise ValueError("Attempt to bind UNSET_VALUE while using unsuitable protocol version (%d < 4)"
                             % self.protocol_version)
        return _UNSET_CELL

    def serialize(self, value, cql_type):
        """
        Return the framed cell for `value` as a value of `cql_type`.
        :const:`None` gives a null cell and :data:`UNSET_VALUE` an unset one.

        :class:`TypeError` is raised for a value the type cannot hold, for
        :class:`~cqlcodec.util.Counter` values and for counter columns.
        :class:`ValueError` is raised for a value outside the range of the
        type, such as a date beyond the wire range or a float too large for
        32 bits.
        """
        typeclass = lookup_cqltype(cql_type)
        if value is None:
            return _NULL_CELL
        if value is UNSET_VALUE:
            return self._unset_cell()
        if isinstance(value, Counter) or issubclass(typeclass, CounterColumnType):
            raise TypeError("Counter values cannot be inserted; bind them as increments "
                            "with serialize_increment()")
        try:
            payload = typeclass.serialize(value)
        except (TypeError, struct.error) as exc:
            raise TypeError('Received an argument of invalid type for a %s value. Got: %s; (%s)'
                            % (typeclass.typename, type(value), exc))
        return _frame(payload)

    def serialize_increment(self, delta):
        """
        Return the framed cell for the delta of a counter update
        (``UPDATE t SET c = c + ? ...``). `delta` is a
        :class:`~cqlcodec.util.Counter` or an integer; negative deltas
        decrement.
        """
        try:
            payload = CounterColumnType.serialize_increment(delta)
        except (TypeError, struct.error) as exc:
            raise TypeError('Received an argument of invalid type for a counter increment. Got: %s; (%s)'
                            % (type(delta), exc))
        return _frame(payload)

    def bind_values(self, values, cql_types, names=None):
        """
        Serialize a whole parameter list. `cql_types` holds the declared type
        of each bind marker, `names` optionally their names. `values` must be:

        * a sequence, even if you are only binding one value, or
        * a dict that relates 1-to-1 between dict keys and `names`

        When using protocol v4+, short sequences are extended with
        :data:`UNSET_VALUE`, as are names missing from a dict. Positions typed
        ``counter`` are serialized as increments. Errors name the failing
        parameter and its CQL type.
        """
        if values is None:
            values = ()
        typeclasses = [lookup_cqltype(t) for t in cql_types]
        if names is None:
            names = ['%d' % i for i in range(len(typeclasses))]
        elif len(names) != len(typeclasses):
            raise ValueError("Got %d names for %d parameters" % (len(names), len(typeclasses)))

        if isinstance(values, dict):
            values_dict = values
            values = []
            for name in names:
                try:
                    values.append(values_dict[name])
                except KeyError:
                    if ProtocolVersion.uses_unset_values(self.protocol_version):
                        values.append(UNSET_VALUE)
                    else:
                        raise KeyError('Parameter name `%s` not found in bound dict.' % (name,))

        if len(values) > len(typeclasses):
            raise ValueError("Too many arguments provided to bind (got %d, expected %d)"
                             % (len(values), len(typeclasses)))

        cells = []
        for name, value, typeclass in zip(names, values, typeclasses):
            try:
                if issubclass(typeclass, CounterColumnType) and value is not None and value is not UNSET_VALUE:
                    cells.append(self.serialize_increment(value))
                else:
                    cells.append(self.serialize(value, typeclass))
            except TypeError as exc:
                raise TypeError('Received an argument of invalid type for parameter "%s". '
                                'Expected: %s, Got: %s; (%s)' % (name, typeclass.typename, type(value), exc))
            except (ValueError, OverflowError) as exc:
                raise ValueError('Received an invalid value for parameter "%s". '
                                 'Expected: %s, Got: %r; (%s)' % (name, typeclass.typename, value, exc))

        missing = len(typeclasses) - len(cells)
        if missing:
            if not ProtocolVersion.uses_unset_values(self.protocol_version):
                raise ValueError("Too few arguments provided to bind (got %d, expected %d)"
                                 % (len(cells), len(typeclasses)))
            log.debug("Padding %d missing parameters with unset values", missing)
            cells.extend(_UNSET_CELL for _ in range(missing))
        return cells
