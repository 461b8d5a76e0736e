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
Cell framing and the body of ``RESULT`` messages of kind ``Rows``.

The functions here work on file-like byte buffers (anything with ``read``
and ``write``, normally :class:`io.BytesIO`) that the transport layer has
already filled with a complete message body.
"""

from collections import namedtuple
import logging

from cqlcodec import FormatError, UnsupportedTypeError, type_codes
from cqlcodec.cqltypes import lookup_cqltype, _cqltypes_by_code
from cqlcodec.marshal import int32_pack, int32_unpack, uint16_pack, uint16_unpack
from cqlcodec.rows import TypedRowSequence, tuple_factory

log = logging.getLogger(__name__)

ColumnMetadata = namedtuple("ColumnMetadata", ['keyspace_name', 'table_name', 'name', 'type'])

_codes_by_cqltype = dict((typeclass, code) for code, typeclass in _cqltypes_by_code.items())

_FLAGS_GLOBAL_TABLES_SPEC = 0x0001
_HAS_MORE_PAGES_FLAG = 0x0002
_NO_METADATA_FLAG = 0x0004
_METADATA_ID_FLAG = 0x0008

_UNSET_VALUE = object()


def _read_exact(f, size):
    data = f.read(size)
    if len(data) != size:
        raise FormatError('buffer', size, len(data))
    return data


def read_int(f):
    return int32_unpack(_read_exact(f, 4))


def write_int(f, i):
    f.write(int32_pack(i))


def read_short(f):
    return uint16_unpack(_read_exact(f, 2))


def write_short(f, s):
    f.write(uint16_pack(s))


def read_binary_string(f):
    size = read_short(f)
    return _read_exact(f, size)


def read_string(f):
    return read_binary_string(f).decode('utf8')


def write_string(f, s):
    if isinstance(s, str):
        s = s.encode('utf8')
    write_short(f, len(s))
    f.write(s)


def read_binary_longstring(f):
    size = read_int(f)
    return _read_exact(f, size)


def write_longstring(f, s):
    write_int(f, len(s))
    f.write(s)


def read_value(f):
    """
    Read one cell and return its payload, or :const:`None` for a null or
    unset cell. Other negative lengths raise :class:`~cqlcodec.FormatError`.
    """
    size = read_int(f)
    if size < 0:
        if size not in (-1, -2):
            raise FormatError('value', '-1, -2 or a non-negative count of', size)
        return None
    return _read_exact(f, size)


def write_value(f, v):
    """
    Write `v` as a cell. `v` is a payload, :const:`None` (null) or
    :data:`~cqlcodec.serializer.UNSET_VALUE`.
    """
    if v is None:
        write_int(f, -1)
    elif v is _UNSET_VALUE:
        write_int(f, -2)
    else:
        write_int(f, len(v))
        f.write(v)


def read_type(f):
    """
    Read a type ``[option]`` and return its codec class. Custom types name
    their server marshal class; anything without a codec raises
    :class:`~cqlcodec.UnsupportedTypeError`.
    """
    optid = read_short(f)
    if optid == type_codes.CUSTOM_TYPE:
        classname = read_string(f)
        return lookup_cqltype(classname)
    try:
        return _cqltypes_by_code[optid]
    except KeyError:
        raise UnsupportedTypeError(optid)


def write_type(f, typeclass):
    typeclass = lookup_cqltype(typeclass)
    try:
        write_short(f, _codes_by_cqltype[typeclass])
    except KeyError:
        write_short(f, type_codes.CUSTOM_TYPE)
        write_string(f, typeclass.cass_parameterized_type(full=True))


def recv_row(f, colcount):
    return [read_value(f) for _ in range(colcount)]


class ResultRows(object):
    """
    The buffered content of a ``Rows`` result: column metadata and, for each
    row, the list of raw cell payloads.
    """

    columns = None
    """
    A list of :class:`ColumnMetadata`, in column order.
    """

    rows = None

    paging_state = None
    """
    Opaque paging state if the server indicated more pages, else :const:`None`.
    """

    result_metadata_id = None

    def __init__(self, columns, rows, paging_state=None, result_metadata_id=None):
        self.columns = list(columns)
        self.rows = rows
        self.paging_state = paging_state
        self.result_metadata_id = result_metadata_id

    @property
    def column_names(self):
        return [c.name for c in self.columns]

    @property
    def column_types(self):
        return [c.type for c in self.columns]

    @property
    def has_more_pages(self):
        return self.paging_state is not None

    def typed(self, target_types=None, row_factory=tuple_factory, converter=None):
        """
        Return a new :class:`~cqlcodec.rows.TypedRowSequence` over the
        buffered rows. Each call starts again from the first row.
        """
        return TypedRowSequence(self.rows, self.column_types, target_types=target_types,
                                column_names=self.column_names, row_factory=row_factory,
                                converter=converter)

    def __len__(self):
        return len(self.rows)

    def __repr__(self):
        return '<ResultRows(columns=%r, rows=%d)>' % (self.column_names, len(self.rows))


def recv_results_metadata(f, result_metadata=None):
    """
    Read the metadata part of a ``Rows`` body. Returns ``(columns,
    paging_state, result_metadata_id)``. When the server skipped the metadata
    (statements prepared with their result metadata), `result_metadata` is
    used instead.
    """
    flags = read_int(f)
    colcount = read_int(f)

    paging_state = None
    if flags & _HAS_MORE_PAGES_FLAG:
        paging_state = read_binary_longstring(f)

    result_metadata_id = None
    if flags & _METADATA_ID_FLAG:
        result_metadata_id = read_binary_string(f)

    if flags & _NO_METADATA_FLAG:
        if result_metadata is None:
            raise ValueError("Result carries no column metadata and none was supplied")
        if len(result_metadata) != colcount:
            raise ValueError("Supplied metadata has %d columns, result has %d"
                             % (len(result_metadata), colcount))
        return list(result_metadata), paging_state, result_metadata_id

    glob_tblspec = bool(flags & _FLAGS_GLOBAL_TABLES_SPEC)
    if glob_tblspec:
        ksname = read_string(f)
        cfname = read_string(f)
    column_metadata = []
    for _ in range(colcount):
        if glob_tblspec:
            colksname = ksname
            colcfname = cfname
        else:
            colksname = read_string(f)
            colcfname = read_string(f)
        colname = read_string(f)
        coltype = read_type(f)
        column_metadata.append(ColumnMetadata(colksname, colcfname, colname, coltype))
    return column_metadata, paging_state, result_metadata_id


def read_rows_result(f, result_metadata=None):
    """
    Parse the body of a ``RESULT`` message of kind ``Rows`` (everything after
    the kind) into a :class:`ResultRows`. Payloads are kept raw; decoding
    happens lazily when the rows are iterated.
    """
    columns, paging_state, result_metadata_id = recv_results_metadata(f, result_metadata)
    rowcount = read_int(f)
    rows = [recv_row(f, len(columns)) for _ in range(rowcount)]
    log.debug("Read %d rows of %d columns", rowcount, len(columns))
    return ResultRows(columns, rows, paging_state, result_metadata_id)


def write_rows_result(f, columns, rows, paging_state=None):
    """
    Write a ``Rows`` body; the inverse of :func:`read_rows_result`. Columns
    that all belong to one table are written with a global table spec.
    """
    tables = set((c.keyspace_name, c.table_name) for c in columns)
    flags = 0
    if len(tables) == 1:
        flags |= _FLAGS_GLOBAL_TABLES_SPEC
    if paging_state is not None:
        flags |= _HAS_MORE_PAGES_FLAG

    write_int(f, flags)
    write_int(f, len(columns))
    if paging_state is not None:
        write_longstring(f, paging_state)
    if flags & _FLAGS_GLOBAL_TABLES_SPEC:
        ksname, cfname = tables.pop()
        write_string(f, ksname)
        write_string(f, cfname)
    for column in columns:
        if not flags & _FLAGS_GLOBAL_TABLES_SPEC:
            write_string(f, column.keyspace_name)
            write_string(f, column.table_name)
        write_string(f, column.name)
        write_type(f, column.type)

    write_int(f, len(rows))
    for row in rows:
        if len(row) != len(columns):
            raise ValueError("Row has %d values, expected %d" % (len(row), len(columns)))
        for value in row:
            write_value(f, value)
