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

import logging


class NullHandler(logging.Handler):

    def emit(self, record):
        pass

logging.getLogger('cqlcodec').addHandler(NullHandler())

__version_info__ = (1, 0, 0)
__version__ = '.'.join(map(str, __version_info__))


class ProtocolVersion(object):
    """
    Defines the native protocol versions whose value encodings this codec
    produces. Scalar value layouts are identical across these versions; the
    version only decides whether unset parameters may be sent.
    """

    V3 = 3
    """
    v3, supported in Cassandra 2.1-->3.x+
    """

    V4 = 4
    """
    v4, supported in Cassandra 2.2-->3.x+;
    added the ``date``, ``smallint`` and ``tinyint`` types and unset values.
    """

    V5 = 5
    """
    v5, finalised in Cassandra 4.0
    """

    SUPPORTED_VERSIONS = (V5, V4, V3)
    """
    A tuple of all supported protocol versions
    """

    MIN_SUPPORTED = min(SUPPORTED_VERSIONS)

    MAX_SUPPORTED = max(SUPPORTED_VERSIONS)

    DEFAULT = V4
    """
    The version used when none is given explicitly.
    """

    @classmethod
    def uses_unset_values(cls, version):
        return version >= cls.V4


class CodecException(Exception):
    """
    Base for all exceptions explicitly raised by the codec.
    """
    pass


class FormatError(CodecException):
    """
    A wire cell's byte length is structurally invalid for its declared type.
    """

    cql_type = None
    """
    The CQL name of the type that was being decoded.
    """

    expected = None
    """
    A description of the length the type requires.
    """

    actual = None
    """
    The number of bytes that were actually present.
    """

    def __init__(self, cql_type, expected, actual):
        Exception.__init__(self, "Invalid length for %s value: expected %s bytes, got %d"
                           % (cql_type, expected, actual))
        self.cql_type = cql_type
        self.expected = expected
        self.actual = actual


class UnsupportedTypeError(CodecException):
    """
    A type tag has no registered codec.
    """

    cql_type = None
    """
    The tag that could not be resolved, as it was given.
    """

    def __init__(self, cql_type):
        Exception.__init__(self, "No codec registered for CQL type %r" % (cql_type,))
        self.cql_type = cql_type


class TypeMismatchError(CodecException, TypeError):
    """
    A decoded value was requested as a native type it cannot be converted to.
    """

    expected = None
    """
    The name of the requested native type.
    """

    actual = None
    """
    The CQL name of the decoded value's type.
    """

    def __init__(self, expected, actual):
        Exception.__init__(self, "Cannot convert %s value to %s" % (actual, expected))
        self.expected = expected
        self.actual = actual


class RowConversionError(CodecException):
    """
    Decoding or converting one column of a result row failed. The row is
    reported as failed as a whole; the original exception is kept as
    :attr:`cause`.
    """

    row_index = None
    column_index = None
    column_name = None

    cause = None
    """
    The :class:`CodecException` (or serialization error) raised for the column.
    """

    def __init__(self, row_index, column_index, column_name, cause):
        Exception.__init__(self, 'Failed converting column %s ("%s") of row %d: %s'
                           % (column_index, column_name, row_index, cause))
        self.row_index = row_index
        self.column_index = column_index
        self.column_name = column_name
        self.cause = cause
