"""
Tests for the semver-style specification syntax.
"""

import unittest

from depsolve.versions import ParseError
from depsolve.versions import VersionSpec
from depsolve.versions import as_spec
from depsolve.versions import parse_spec
from depsolve.versions import to_semver
from depsolve.versions import version
from depsolve.versions import xast
from depsolve.versions.parse import parse


class ParserTestCase(unittest.TestCase):

    def test_implicit_caret(self):
        item, = parse('1.2')
        self.assertIsInstance(item, xast.Unary)
        self.assertEqual('^', item.op)
        self.assertEqual(2, item.version.ndigits)

    def test_items_order(self):
        items = parse('~1, >= 2.3, 4 - 5')
        self.assertEqual(['~', '>='], [item.op for item in items[:2]])
        self.assertIsInstance(items[2], xast.Hyphen)
        self.assertEqual((4, 0, 0), (items[2].lower.major,
                                     items[2].lower.minor,
                                     items[2].lower.patch))

    def test_trailing_comma(self):
        self.assertEqual(1, len(parse('1.2,')))

    def test_unicode_operators(self):
        self.assertEqual('>=', parse('≥ 1')[0].op)
        self.assertEqual('<=', parse('≤ 1')[0].op)


class SemverSpecTestCase(unittest.TestCase):

    def assertSpec(self, expected, text):
        self.assertEqual(as_spec(expected), parse_spec(text),
                         '{0!r} -> {1}'.format(text, parse_spec(text)))

    def test_caret(self):
        self.assertSpec('1.2.3-1', '^1.2.3')
        self.assertSpec('1.2.0-1', '^1.2')
        self.assertSpec('1.0.0-1', '^1')
        self.assertSpec('0.2.3-0.2', '^0.2.3')
        self.assertSpec('0.0.3-0.0.3', '^0.0.3')
        self.assertSpec('0.0.0-0.0', '^0.0')
        self.assertSpec('0.0.0-0', '^0')

    def test_tilde(self):
        self.assertSpec('1.2.3-1.2', '~1.2.3')
        self.assertSpec('1.2.0-1.2', '~1.2')
        self.assertSpec('1.0.0-1', '~1')

    def test_bare_is_caret(self):
        for text in ['1.2.3', '1.2', '1', '0.0.3', '0']:
            self.assertEqual(parse_spec('^' + text), parse_spec(text))

    def test_union(self):
        self.assertSpec(['0.0.3-0.0.3', '1.2.0-1'], '0.0.3, 1.2')
        self.assertSpec(['1.2.3-1.2', '1.0.0-1'], '~1.2.3, ~v1')

    def test_less(self):
        self.assertSpec('0.0.0 - 1.2.2', '<1.2.3')
        self.assertSpec('0.0.0 - 1.1', '<1.2')
        self.assertSpec('0.0.0 - 0', '<1')
        self.assertSpec('0.0.0 - 1', '<2')
        self.assertSpec('0.0.0 - 0.2.2', '<0.2.3')
        self.assertSpec('0.0.0 - 2.0.2', '<2.0.3')
        self.assertIn(version('0.2.3'), parse_spec('<0.2.4'))
        self.assertNotIn(version('0.2.4'), parse_spec('<0.2.4'))

    def test_less_equal(self):
        self.assertSpec('0.0.0 - 1.2.0', '<= 1.2')
        self.assertEqual(parse_spec('≤1.2'), parse_spec('<=1.2'))

    def test_greater(self):
        self.assertSpec('1.3-*', '> 1.2')
        self.assertSpec('2-*', '> 1')
        self.assertSpec('1.2.4-*', '> 1.2.3')

    def test_equal(self):
        self.assertSpec('1.2.3', '=1.2.3')
        self.assertSpec('1.2.0', '=1.2')
        self.assertSpec('1.0.0', '  =1')
        self.assertIn(version('1.2.3'), parse_spec('=1.2.3'))
        self.assertNotIn(version('1.2.4'), parse_spec('=1.2.3'))
        self.assertNotIn(version('1.2.2'), parse_spec('=1.2.3'))

    def test_greater_equal(self):
        self.assertEqual(parse_spec('≥1.3.0'), parse_spec('>=1.3.0'))
        self.assertSpec('1.2.3-*', '>=   1.2.3')
        self.assertSpec('1.2.0-*', '>=1.2  ')
        self.assertSpec('1.0.0-*', '  >=  1')
        self.assertIn(version('1.0.0'), parse_spec('>=1'))
        self.assertIn(version('0.0.1'), parse_spec('>=0'))
        self.assertNotIn(version('1.2.2'), parse_spec('>=1.2.3'))

    def test_hyphen(self):
        self.assertSpec('1.2-4.5.6', '1.2 - 4.5.6')
        self.assertSpec('1-4', 'v1 - v4')
        self.assertTrue(parse_spec('2 - 1').is_empty())

    def test_membership(self):
        cases = [
            ('1.5.2', '1.2.3', True),
            ('1.2.3', '1.2.3', True),
            ('2.0.0', '1.2.3', False),
            ('1.2.2', '1.2.3', False),
            ('1.2.99', '~1.2.3', True),
            ('1.3.0', '~1.2.3', False),
            ('1.9.9', '1.2', True),
            ('0.2.3', '0.2.3', True),
            ('0.3.0', '0.2.3', False),
            ('0.0.0', '0', True),
            ('0.99.0', '0', True),
            ('1.0.0', '0', False),
            ('0.0.99', '0.0', True),
            ('0.1.0', '0.0', False),
        ]
        for v, text, expected in cases:
            self.assertEqual(expected, version(v) in parse_spec(text),
                             '{0} in {1!r}'.format(v, text))

    def test_errors(self):
        for text in ['', '  ', '^^0.2.3', '^^0.2.3.4', '0.0.0', '1.2.3.4',
                     '1 -2', '1- 2', '1-2', '>= 1 - 2', '1,,2', ',1',
                     '1.2 x', '<0', '< 0.0', '=', '1 -']:
            with self.assertRaises(ParseError, msg=repr(text)):
                parse_spec(text)

    def test_error_position(self):
        with self.assertRaises(ParseError) as cm:
            parse_spec('1.2 x')
        self.assertEqual('1.2 x', cm.exception.text)
        self.assertEqual(4, cm.exception.pos)


class ToSemverTestCase(unittest.TestCase):

    def assertRoundtrip(self, text):
        spec_1 = parse_spec(text)
        text_2 = to_semver(spec_1)
        spec_2 = parse_spec(text_2)
        text_3 = to_semver(spec_2)
        spec_3 = parse_spec(text_3)
        self.assertEqual(spec_1, spec_2, '{0!r} -> {1!r}'.format(text, text_2))
        self.assertEqual(spec_2, spec_3, '{0!r} -> {1!r}'.format(text, text_3))

    def test_roundtrip_specifiers(self):
        bases = ['0.0.3', '0.2.3', '1.2.3', '0.0', '0.2', '1.2', '0', '1']
        for specifier in ['', '^', '~', '= ', '>= ', '≥ ']:
            for base in bases:
                self.assertRoundtrip(specifier + base)
            self.assertRoundtrip(', '.join(specifier + base for base in bases))

    def test_roundtrip_less(self):
        bases = ['0.0.3', '0.2.3', '1.2.3', '0.2', '1.2', '1']
        for base in bases:
            self.assertRoundtrip('< ' + base)
        self.assertRoundtrip(', '.join('< ' + base for base in bases))

    def test_roundtrip_ranges(self):
        for text in ['1.2.3 - 4.5.6', '0.2.3 - 4.5.6', '1.2 - 4.5.6',
                     '1 - 4.5.6', '0.2 - 4.5.6', '0.2 - 0.5.6',
                     '1.2.3 - 4.5', '1.2.3 - 4', '1.2 - 4.5', '1.2 - 4',
                     '1 - 4.5', '1 - 4', '0.2.3 - 4.5', '0.2.3 - 4',
                     '0.2 - 4.5', '0.2 - 4', '0.2 - 0.5', '0.2 - 0',
                     '1 - 2.3, 4.5.6 - 7.8.9',
                     '1 - 0', '2 - 1', '>= 0']:
            self.assertRoundtrip(text)

    def test_canonical_text(self):
        self.assertEqual('1 - 0', to_semver(VersionSpec()))
        self.assertEqual('>= 0', to_semver(as_spec('*')))
        self.assertEqual('< 1.2', to_semver(parse_spec('<1.2')))
        self.assertEqual('<= 1.2.2', to_semver(parse_spec('<1.2.3')))
        self.assertEqual('>= 1.2.3', to_semver(parse_spec('>=1.2.3')))
        self.assertEqual('1.2.3 - 1', to_semver(parse_spec('^1.2.3')))

    def test_open_ranges(self):
        self.assertEqual('>= 2', to_semver(as_spec('2-*')))
        self.assertEqual('>= 1.2', to_semver(as_spec('1.2-*')))
        self.assertEqual('>= 1.3', to_semver(parse_spec('> 1.2')))
        for text in ['> 1.2', '> 1', '> 1.2.3', '^0.2, > 3']:
            self.assertRoundtrip(text)

    def test_same_versions_equal(self):
        self.assertEqual(as_spec('*'), parse_spec('>= 0'))
        self.assertEqual(as_spec('1.3-*'), parse_spec('>= 1.3.0'))
        self.assertEqual(parse_spec('> 1.2'), parse_spec('>= 1.3'))
        self.assertEqual(hash(as_spec('1.3-*')), hash(parse_spec('>= 1.3.0')))


if __name__ == '__main__':
    unittest.main()
