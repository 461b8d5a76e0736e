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
import unittest

from collections import OrderedDict
import datetime
from decimal import Decimal
import io
import struct

from cqlcodec.cqltypes import Int32Type, lookup_cqltype
from cqlcodec.decoder import decode_cell
from cqlcodec.marshal import int64_unpack, int64_pack
from cqlcodec.protocol import ColumnMetadata, read_rows_result, read_value, write_rows_result
from cqlcodec.serializer import ValueSerializer
from cqlcodec.util import Counter, Date


class FakeTable(object):
    """
    Stand-in for ``ks.<name> (id int PRIMARY KEY, val <cql_type>)``: rows
    are stored as raw payloads and selected back through a ``Rows`` body.
    """

    def __init__(self, cql_type):
        self.typeclass = lookup_cqltype(cql_type)
        self.columns = [ColumnMetadata('ks', cql_type, 'id', Int32Type),
                        ColumnMetadata('ks', cql_type, 'val', self.typeclass)]
        self.rows = OrderedDict()

    def insert_literal(self, key, value):
        # the server encodes a CQL literal itself
        self.rows[key] = [Int32Type.serialize(key), self.typeclass.serialize(value)]

    def insert(self, cells):
        key = decode_cell('int', cells[0]).value
        self.rows[key] = [read_value(io.BytesIO(cell)) for cell in cells]

    def increment(self, cells):
        delta_payload, key_payload = [read_value(io.BytesIO(cell)) for cell in cells]
        key = Int32Type.from_binary(key_payload).value
        current = int64_unpack(self.rows[key][1]) if key in self.rows else 0
        self.rows[key] = [key_payload, int64_pack(current + int64_unpack(delta_payload))]

    def select(self, target_type):
        f = io.BytesIO()
        write_rows_result(f, self.columns, list(self.rows.values()))
        result = read_rows_result(io.BytesIO(f.getvalue()))
        return [r.result()[1] for r in result.typed((int, target_type))]


class TableRoundTripTest(unittest.TestCase):

    def setUp(self):
        self.serializer = ValueSerializer()

    def run_tests(self, tests, cql_type, parse, target_type):
        table = FakeTable(cql_type)
        for text in tests:
            table.insert_literal(0, parse(text))
            table.insert(self.serializer.bind_values((1, parse(text)), ('int', cql_type)))

            expected = parse(text)
            self.assertEqual(table.select(target_type), [expected, expected], msg=text)

    def test_varint(self):
        tests = ["0", "1", "127", "128", "129", "-1", "-128", "-129",
                 "123456789012345678901234567890", "-123456789012345678901234567890"]
        self.run_tests(tests, 'varint', int, int)

    def test_decimal(self):
        tests = ["4.2", "0", "1.999999999999999999999999999999999999999", "997",
                 "123456789012345678901234567890.1234567890",
                 "-123456789012345678901234567890.1234567890"]
        self.run_tests(tests, 'decimal', Decimal, Decimal)

    def test_bool(self):
        self.run_tests(["true", "false"], 'boolean', lambda text: text == "true", bool)

    def test_float(self):
        def parse(text):
            return struct.unpack('>f', struct.pack('>f', float(text)))[0]

        tests = ["3.14", "997", "0.1", "128", "-128", "3.4028235e38", "-3.4028235e38"]
        self.run_tests(tests, 'float', parse, float)

    def test_counter(self):
        table = FakeTable('counter')
        tests = ["1", "997", str(2 ** 63 - 1)]
        for i, text in enumerate(tests):
            table.increment(self.serializer.bind_values((Counter(int(text)), i), ('counter', 'int')))

        self.assertEqual(table.select(Counter), [Counter(int(text)) for text in tests])

        table.increment(self.serializer.bind_values((-1, 1), ('counter', 'int')))
        self.assertEqual(table.select(Counter)[1], Counter(996))

    def test_counter_cannot_be_inserted(self):
        self.assertRaises(TypeError, self.serializer.bind_values, (0, Counter(1)), ('int', 'bigint'))
        self.assertRaises(TypeError, self.serializer.serialize, Counter(1), 'counter')

    def test_date(self):
        table = FakeTable('date')
        tests = [
            ("0001-1-1", datetime.date.min),
            ("1970-01-01", datetime.date(1970, 1, 1)),
            ("2020-03-07", datetime.date(2020, 3, 7)),
            ("1337-4-5", datetime.date(1337, 4, 5)),
            ("9999-12-31", datetime.date.max),
            # one day beyond datetime.date
            ("0000-12-31", None),
            ("10000-1-1", None),
            ("-1-12-31", None),
            # bounds of the date type
            ("-5877641-06-23", None),
            ("5881580-07-11", None),
        ]
        for text, date in tests:
            table.insert_literal(0, Date(text))
            table.rows.pop(1, None)
            self.assertEqual(table.select(datetime.date), [date], msg=text)
            self.assertEqual(str(table.select(Date)[0]), str(Date(text)))

            if date is not None:
                table.insert(self.serializer.bind_values((0, date), ('int', 'date')))
                self.assertEqual(table.select(datetime.date), [date])

        for text in ("-5877641-06-22", "5881580-07-12"):
            self.assertRaises(ValueError, self.serializer.serialize, Date(text), 'date')
