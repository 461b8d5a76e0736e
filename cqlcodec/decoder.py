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
Decoding of wire cells into :class:`~cqlcodec.values.CQLValue` instances.

Both functions are pure: they only read their arguments, so they can be
called from any number of threads at once and always give equal results for
equal input.
"""

from cqlcodec import FormatError
from cqlcodec.cqltypes import lookup_cqltype
from cqlcodec.marshal import int32_unpack
from cqlcodec.values import NullValue


def decode_value(cql_type, payload):
    """
    Decode an unframed payload. `payload` is :const:`None` for a null cell.

    `cql_type` is anything :func:`~cqlcodec.cqltypes.lookup_cqltype` accepts;
    an unknown tag raises :class:`~cqlcodec.UnsupportedTypeError` and a
    payload of the wrong size raises :class:`~cqlcodec.FormatError`.
    """
    return lookup_cqltype(cql_type).from_binary(payload)


def decode_cell(cql_type, cell):
    """
    Decode a framed cell: a signed 32-bit big-endian length followed by the
    payload. A negative length is a null (``-1``) or an unset (``-2``) value
    and decodes to :class:`~cqlcodec.values.NullValue` whatever the type;
    any other negative length raises :class:`~cqlcodec.FormatError`.

    Example:

        >>> decode_cell('int', b'\\x00\\x00\\x00\\x04\\x00\\x00\\x00\\x2a')
        Int32Value(value=42)
        >>> decode_cell('decimal', b'\\xff\\xff\\xff\\xff')
        NullValue(declared_type='decimal')

    """
    typeclass = lookup_cqltype(cql_type)
    if len(cell) < 4:
        raise FormatError('cell', 'at least 4', len(cell))
    size = int32_unpack(cell[:4])
    if size < 0:
        if size not in (-1, -2):
            raise FormatError(typeclass.typename, '-1, -2 or a non-negative count of', size)
        if len(cell) != 4:
            raise FormatError('null cell', 4, len(cell))
        return NullValue(typeclass.typename)
    if len(cell) - 4 != size:
        raise FormatError(typeclass.typename, size, len(cell) - 4)
    return typeclass.from_binary(cell[4:])
