import unittest
import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parent.parent))
import main
from keytok.core import EncodingMethod
from keytok.errors import ConfigurationError
from keytok.sequence import (
    generate_alphabetic_sequence,
    generate_base64_sequence,
    generate_key_sequence,
    generate_numeric_sequence,
    generate_padded_numeric_sequence,
    generate_short_unique_sequence,
    original_generate_key_sequence,
)


class TestSequenceGenerator(unittest.TestCase):
    def setUp(self):
        main.Reporter._metrics = {}

    def test_alphabetic_sequence(self):
        tokens = [generate_alphabetic_sequence(i) for i in (0, 1, 25, 26, 27, 51, 52, 701, 702)]
        print('Alphabetic tokens:', tokens)
        self.assertEqual(tokens, ['a', 'b', 'z', 'aa', 'ab', 'az', 'ba', 'zz', 'aaa'])

    def test_alphabetic_has_no_gaps(self):
        tokens = [generate_alphabetic_sequence(i) for i in range(26 + 26 * 26)]
        self.assertEqual(len(set(tokens)), len(tokens))
        self.assertEqual(tokens[-1], 'zz')

    def test_numeric_sequence(self):
        self.assertEqual(generate_numeric_sequence(0), '0')
        self.assertEqual(generate_numeric_sequence(1234), '1234')

    def test_padded_numeric_sequence(self):
        self.assertEqual(generate_padded_numeric_sequence(10, 3), '010')
        self.assertEqual(generate_padded_numeric_sequence(7), '0007')
        self.assertEqual(generate_padded_numeric_sequence(12345, 4), '12345')
        self.assertEqual(generate_padded_numeric_sequence(5, 0), '5')

    def test_base64_sequence(self):
        tokens = [generate_base64_sequence(i) for i in (0, 1, 26, 52, 62, 63, 64, 65, 4095, 4096)]
        print('Base64 tokens:', tokens)
        self.assertEqual(tokens, ['a', 'b', 'A', '0', '_', '$', 'ba', 'bb', '$$', 'baa'])

    def test_short_unique_uses_clock(self):
        self.assertEqual(generate_short_unique_sequence(0, clock=lambda: 10), '000a00')
        self.assertEqual(generate_short_unique_sequence(37, clock=lambda: 36 ** 5 - 1), 'zzzz11')
        self.assertEqual(generate_short_unique_sequence(1296, clock=lambda: 10), '000a100')

    def test_short_unique_wall_clock_shape(self):
        token = generate_short_unique_sequence(3)
        print('Short unique token:', token)
        self.assertEqual(len(token), 6)
        self.assertTrue(token.endswith('03'))

    def test_dispatch(self):
        self.assertEqual(generate_key_sequence(27), 'ab')
        self.assertEqual(generate_key_sequence(27, EncodingMethod.NUMERIC), '27')
        self.assertEqual(generate_key_sequence(27, 'numeric'), '27')
        self.assertEqual(
            generate_key_sequence(3, EncodingMethod.PADDED_NUMERIC, padding_length=2), '03'
        )
        self.assertEqual(generate_key_sequence(64, EncodingMethod.BASE64), 'ba')
        self.assertEqual(
            generate_key_sequence(
                4, EncodingMethod.CUSTOM, custom_generator=lambda i: 'k%d' % i
            ),
            'k4',
        )

    def test_custom_requires_generator(self):
        with self.assertRaises(ConfigurationError):
            generate_key_sequence(0, EncodingMethod.CUSTOM)

    def test_custom_must_return_string(self):
        with self.assertRaises(ConfigurationError):
            generate_key_sequence(0, EncodingMethod.CUSTOM, custom_generator=lambda i: i)

    def test_unknown_method_falls_back_to_alphabetic(self):
        token = generate_key_sequence(26, 'rot13', reporter=main.Reporter)
        fallbacks = main.Reporter.report('method_fallbacks')
        print('Fallback token:', token, 'fallbacks:', fallbacks)
        self.assertEqual(token, 'aa')
        self.assertEqual(fallbacks, 1)

    def test_invalid_index(self):
        for index in (-1, 1.5, True, '3'):
            with self.assertRaises(ValueError):
                generate_alphabetic_sequence(index)

    def test_legacy_alias(self):
        self.assertIs(original_generate_key_sequence, generate_alphabetic_sequence)


if __name__ == '__main__':
    unittest.main()
