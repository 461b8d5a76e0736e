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
This module holds the typed view over buffered result rows and the row
factories that shape each converted row.
"""

from collections import namedtuple, OrderedDict
from functools import lru_cache
import keyword
import logging
import re

from cqlcodec import CodecException, FormatError, RowConversionError
from cqlcodec.conversion import default_converter
from cqlcodec.cqltypes import lookup_cqltype
from cqlcodec.decoder import decode_value

log = logging.getLogger(__name__)

NON_ALPHA_REGEX = re.compile('[^a-zA-Z0-9]')
START_BADCHAR_REGEX = re.compile('^[^a-zA-Z0-9]*')
END_BADCHAR_REGEX = re.compile('[^a-zA-Z0-9_]*$')


def _clean_column_name(name):
    return NON_ALPHA_REGEX.sub("_", START_BADCHAR_REGEX.sub("", END_BADCHAR_REGEX.sub("", name)))


def _sanitize_identifiers(field_names):
    names_out = list(field_names)
    for index, name in enumerate(field_names):
        if (not all(c.isalnum() or c == '_' for c in name)
                or keyword.iskeyword(name)
                or not name
                or name[0].isdigit()
                or name.startswith('_')):
            names_out[index] = 'field_%d_' % index
    if len(names_out) != len(set(names_out)):
        observed_names = set()
        for index, name in enumerate(names_out):
            while names_out[index] in observed_names:
                names_out[index] = "%s_" % (names_out[index],)
            observed_names.add(names_out[index])
    return names_out


def tuple_factory(colnames, row):
    """
    Returns each row as a tuple. This is the default row factory.

    Example::

        >>> rows = result.typed((str, int), row_factory=tuple_factory)
        >>> print(next(rows).result())
        ('Bob', 42)
    """
    return tuple(row)


@lru_cache(maxsize=128)
def _row_class(colnames):
    clean_column_names = [_clean_column_name(name) for name in colnames]
    try:
        return namedtuple('Row', clean_column_names)
    except ValueError:
        log.warning("Failed creating named tuple for results with column names %s (cleaned: %s) "
                    "(see Python 'namedtuple' documentation for details on name rules). "
                    "Results will be returned with positional names. "
                    "Avoid this by choosing different names, using SELECT \"<col name>\" AS aliases, "
                    "or specifying a different row_factory", colnames, clean_column_names)
        return namedtuple('Row', _sanitize_identifiers(clean_column_names))


def named_tuple_factory(colnames, row):
    """
    Returns each row as a `namedtuple <https://docs.python.org/3/library/collections.html#collections.namedtuple>`_.

    Example::

        >>> user = next(result.typed((str, int), row_factory=named_tuple_factory)).result()

        >>> # you can access field by their name:
        >>> print("name: %s, age: %d" % (user.name, user.age))
        name: Bob, age: 42

        >>> # or you can access fields by their position (like a tuple)
        >>> name, age = user
    """
    return _row_class(tuple(colnames))(*row)


def dict_factory(colnames, row):
    """
    Returns each row as a dict.
    """
    return dict(zip(colnames, row))


def ordered_dict_factory(colnames, row):
    """
    Like :meth:`~cqlcodec.rows.dict_factory`, but returns each row as an OrderedDict,
    so the order of the columns is preserved.
    """
    return OrderedDict(zip(colnames, row))


class RowResult(namedtuple('RowResult', ['success', 'row_or_exc'])):
    """
    The outcome of converting one row. `row_or_exc` is the row built by the
    row factory when `success` is true, else the
    :class:`~cqlcodec.RowConversionError` describing the failure.
    """

    __slots__ = ()

    def result(self):
        """
        Return the row, or raise the stored error.
        """
        if self.success:
            return self.row_or_exc
        raise self.row_or_exc


class TypedRowSequence(object):
    """
    A lazy, forward-only iterator of :class:`RowResult` over buffered result
    rows. Each step decodes and converts every column of one row, in column
    order; a failure in any column fails the whole row, and iteration goes
    on with the next one.

    `rows` is an iterable of rows, each a sequence of cell payloads (bytes,
    or :const:`None` for null). `column_types` holds one type tag per column.
    `target_types`, if given, holds the native type each column is converted
    to; otherwise each value is converted to the default native type of its
    CQL type.

    The sequence can be consumed only once and is not safe to share between
    threads. Build a new one from the same rows to start over.

    Example::

        >>> for r in TypedRowSequence(rows, ['int', 'decimal'], (int, Decimal)):
        ...     if r.success:
        ...         handle(r.row_or_exc)
        ...     else:
        ...         log_bad_row(r.row_or_exc)
    """

    column_types = None
    """
    The resolved codec class of each column.
    """

    column_names = None

    target_types = None

    def __init__(self, rows, column_types, target_types=None, column_names=None,
                 row_factory=tuple_factory, converter=None):
        self.column_types = [lookup_cqltype(t) for t in column_types]
        if target_types is not None:
            target_types = tuple(target_types)
            if len(target_types) != len(self.column_types):
                raise ValueError("Got %d target types for %d columns"
                                 % (len(target_types), len(self.column_types)))
        self.target_types = target_types
        if column_names is None:
            column_names = ['column%d' % i for i in range(len(self.column_types))]
        elif len(column_names) != len(self.column_types):
            raise ValueError("Got %d column names for %d columns"
                             % (len(column_names), len(self.column_types)))
        self.column_names = list(column_names)
        self.row_factory = row_factory
        self._converter = converter or default_converter
        self._rows = iter(rows)
        self._index = 0

    def _convert_column(self, column_index, payload):
        value = decode_value(self.column_types[column_index], payload)
        if self.target_types is None:
            return self._converter.to_native(value)
        return self._converter.convert(self.target_types[column_index], value)

    def _convert_row(self, row_index, row):
        if len(row) != len(self.column_types):
            raise RowConversionError(row_index, None, None,
                                     FormatError('row', len(self.column_types), len(row)))
        values = []
        for column_index, payload in enumerate(row):
            try:
                values.append(self._convert_column(column_index, payload))
            except (CodecException, ValueError) as exc:
                raise RowConversionError(row_index, column_index,
                                         self.column_names[column_index], exc)
        return self.row_factory(self.column_names, values)

    def __iter__(self):
        return self

    def __next__(self):
        row = next(self._rows)
        row_index = self._index
        self._index += 1
        try:
            return RowResult(True, self._convert_row(row_index, row))
        except RowConversionError as exc:
            log.debug("Row %d could not be converted: %s", row_index, exc)
            return RowResult(False, exc)

    def rows(self):
        """
        Yield the remaining rows, raising the first conversion error
        encountered.
        """
        for row_result in self:
            yield row_result.result()
