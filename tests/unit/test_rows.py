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
from decimal import Decimal
import logging

from mock import Mock

from cqlcodec import FormatError, RowConversionError, TypeMismatchError, UnsupportedTypeError
from cqlcodec.conversion import Converter
from cqlcodec.rows import (TypedRowSequence, RowResult, dict_factory, named_tuple_factory,
                           ordered_dict_factory, tuple_factory)
from cqlcodec.util import Counter, Date

log = logging.getLogger(__name__)

INT_ONE = b'\x00\x00\x00\x01'
DECIMAL_4_20 = b'\x00\x00\x00\x02\x01\xa4'


class TypedRowSequenceTest(unittest.TestCase):

    def test_converts_rows_in_order(self):
        rows = [[INT_ONE, DECIMAL_4_20], [b'\x00\x00\x00\x02', None]]
        results = list(TypedRowSequence(rows, ['int', 'decimal'], (int, Decimal)))
        self.assertEqual(results, [RowResult(True, (1, Decimal('4.20'))),
                                   RowResult(True, (2, None))])
        self.assertEqual([r.result() for r in results], [(1, Decimal('4.20')), (2, None)])

    def test_default_native_types(self):
        rows = [[b'\x00' * 7 + b'\x02', b'\x80\x00\x00\x01', b'abc']]
        result = next(TypedRowSequence(rows, ['counter', 'date', 'text']))
        self.assertTrue(result.success)
        self.assertEqual(result.row_or_exc, (Counter(2), Date(1), u'abc'))

    def test_failed_row_does_not_stop_iteration(self):
        rows = [[INT_ONE], [b'\x00\x00\x00'], [b'\x00\x00\x00\x03']]
        results = list(TypedRowSequence(rows, ['int'], (int,)))
        self.assertEqual(len(results), 3)
        self.assertEqual([r.success for r in results], [True, False, True])

        exc = results[1].row_or_exc
        self.assertIsInstance(exc, RowConversionError)
        self.assertEqual((exc.row_index, exc.column_index, exc.column_name), (1, 0, 'column0'))
        self.assertIsInstance(exc.cause, FormatError)
        self.assertRaises(RowConversionError, results[1].result)

    def test_mismatch_fails_row(self):
        rows = [[b'\x01', INT_ONE]]
        result = next(TypedRowSequence(rows, ['boolean', 'int'], (bool, str), column_names=['ok', 'n']))
        self.assertFalse(result.success)
        self.assertEqual(result.row_or_exc.column_index, 1)
        self.assertEqual(result.row_or_exc.column_name, 'n')
        self.assertIsInstance(result.row_or_exc.cause, TypeMismatchError)

    def test_invalid_text_fails_row(self):
        result = next(TypedRowSequence([[b'\xff\xfe']], ['text'], (str,)))
        self.assertFalse(result.success)
        self.assertIsInstance(result.row_or_exc.cause, UnicodeDecodeError)

    def test_wrong_row_width(self):
        results = list(TypedRowSequence([[INT_ONE, INT_ONE], [INT_ONE]], ['int'], (int,)))
        self.assertFalse(results[0].success)
        self.assertIsNone(results[0].row_or_exc.column_index)
        self.assertIsInstance(results[0].row_or_exc.cause, FormatError)
        self.assertTrue(results[1].success)

    def test_single_pass(self):
        rows = TypedRowSequence([[INT_ONE], [INT_ONE]], ['int'])
        self.assertEqual(len(list(rows)), 2)
        self.assertEqual(list(rows), [])
        self.assertRaises(StopIteration, next, rows)

    def test_empty(self):
        self.assertEqual(list(TypedRowSequence([], ['int'], (int,))), [])
        self.assertEqual(list(TypedRowSequence([[]], [])), [RowResult(True, ())])

    def test_lazy(self):
        rows = Mock()
        rows.__iter__ = Mock(return_value=iter([[INT_ONE]]))
        sequence = TypedRowSequence(rows, ['int'])
        rows.__iter__.assert_called_once_with()
        self.assertEqual(next(sequence).result(), (1,))

    def test_strict_rows(self):
        rows = [[INT_ONE], [b'\x00'], [INT_ONE]]
        strict = TypedRowSequence(rows, ['int'], (int,)).rows()
        self.assertEqual(next(strict), (1,))
        self.assertRaises(RowConversionError, next, strict)

    def test_column_types_resolved_up_front(self):
        self.assertRaises(UnsupportedTypeError, TypedRowSequence, [], ['int', 'inet'])

    def test_length_checks(self):
        self.assertRaises(ValueError, TypedRowSequence, [], ['int'], (int, str))
        self.assertRaises(ValueError, TypedRowSequence, [], ['int'], column_names=['a', 'b'])

    def test_custom_converter(self):
        converter = Converter()
        converter.mapping[int] = Mock(return_value='converted')
        result = next(TypedRowSequence([[INT_ONE]], ['int'], (int,), converter=converter))
        self.assertEqual(result.result(), ('converted',))
        converter.mapping[int].assert_called_once()

    def test_row_factories(self):
        rows = [[INT_ONE, b'abc']]
        names = ['id', 'name']
        self.assertEqual(next(TypedRowSequence(rows, ['int', 'text'], column_names=names,
                                               row_factory=dict_factory)).result(),
                         {'id': 1, 'name': u'abc'})
        ordered = next(TypedRowSequence(rows, ['int', 'text'], column_names=names,
                                        row_factory=ordered_dict_factory)).result()
        self.assertEqual(list(ordered.items()), [('id', 1), ('name', u'abc')])
        named = next(TypedRowSequence(rows, ['int', 'text'], column_names=names,
                                      row_factory=named_tuple_factory)).result()
        self.assertEqual((named.id, named.name), (1, u'abc'))
        self.assertEqual(tuple(named), (1, u'abc'))


class RowFactoryTest(unittest.TestCase):

    def test_tuple_factory(self):
        self.assertEqual(tuple_factory(['a', 'b'], [1, 2]), (1, 2))

    def test_dict_factories(self):
        self.assertEqual(dict_factory(['a', 'b'], [1, 2]), {'a': 1, 'b': 2})
        self.assertEqual(ordered_dict_factory(['b', 'a'], [1, 2]), OrderedDict([('b', 1), ('a', 2)]))

    def test_named_tuple_cleans_names(self):
        row = named_tuple_factory(['"quoted col"', 'count(*)'], [1, 2])
        self.assertEqual(row.quoted_col, 1)
        self.assertEqual(row.count, 2)

    def test_named_tuple_positional_fallback(self):
        row = named_tuple_factory(['class', 'def', 'class'], [1, 2, 3])
        self.assertEqual(tuple(row), (1, 2, 3))
        self.assertEqual(row._fields, ('field_0_', 'field_1_', 'field_2_'))

    def test_named_tuple_long_column_list(self):
        colnames = ['col{}'.format(x) for x in range(300)]
        row = named_tuple_factory(colnames, ['value{}'.format(x) for x in range(300)])
        self.assertEqual(row.col0, 'value0')
        self.assertEqual(row.col299, 'value299')
