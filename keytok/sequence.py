"""Index to token generators.

Every generator maps a zero-based index to a token string.  The alphabetic,
numeric, padded numeric and base64 sequences are pure functions of their
arguments.  :func:`generate_short_unique_sequence` mixes in the wall clock and
therefore yields different tokens across runs; callers that need reproducible
dictionaries must not use it.
"""

ALPHABET = 'abcdefghijklmnopqrstuvwxyz'
BASE64_CHARSET = ALPHABET + ALPHABET.upper() + '0123456789_$'
BASE36_CHARSET = '0123456789' + ALPHABET


def _check_index(index):
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        raise ValueError('Index must be non-negative integer, got %r' % (index,))


def _to_base36(value):
    if value == 0:
        return '0'
    digits = []
    while value > 0:
        digits.append(BASE36_CHARSET[value % 36])
        value //= 36
    return ''.join(reversed(digits))


def generate_alphabetic_sequence(index):
    _check_index(index)
    key = ''
    i = index
    while i >= 0:
        key = ALPHABET[i % 26] + key
        i = i // 26 - 1
    return key


def generate_numeric_sequence(index):
    _check_index(index)
    return str(index)


def generate_padded_numeric_sequence(index, padding_length=4):
    _check_index(index)
    if padding_length is None:
        padding_length = 4
    return str(index).rjust(padding_length, '0')


def generate_base64_sequence(index):
    """Positional base-64 over ``a-z A-Z 0-9 _ $``; index 0 is ``'a'``."""
    _check_index(index)
    base = len(BASE64_CHARSET)
    if index == 0:
        return BASE64_CHARSET[0]
    key = ''
    i = index
    while i > 0:
        key = BASE64_CHARSET[i % base] + key
        i //= base
    return key


def generate_short_unique_sequence(index, clock=None):
    """Return the last four base-36 digits of the clock plus the index.

    ``clock`` must return milliseconds; it defaults to the wall clock, which
    makes the result non-deterministic.
    """
    _check_index(index)
    if clock is None:
        import time
        millis = time.time_ns() // 1_000_000
    else:
        millis = int(clock())
    timestamp = _to_base36(millis)[-4:].rjust(4, '0')
    counter = _to_base36(index).rjust(2, '0')
    return timestamp + counter


def generate_key_sequence(
    index,
    method=None,
    padding_length=4,
    custom_generator=None,
    clock=None,
    reporter=None,
):
    from .core import EncodingMethod
    from .errors import ConfigurationError
    if not EncodingMethod.is_known(method) and reporter:
        count = reporter.report('method_fallbacks') or 0
        reporter.report(
            'method_fallbacks',
            'Number of unknown encoding methods replaced by alphabetic',
            count + 1,
        )
    method = EncodingMethod.coerce(method)
    if method is EncodingMethod.NUMERIC:
        return generate_numeric_sequence(index)
    if method is EncodingMethod.PADDED_NUMERIC:
        return generate_padded_numeric_sequence(index, padding_length)
    if method is EncodingMethod.BASE64:
        return generate_base64_sequence(index)
    if method is EncodingMethod.SHORT_UNIQUE:
        return generate_short_unique_sequence(index, clock=clock)
    if method is EncodingMethod.CUSTOM:
        if custom_generator is None:
            raise ConfigurationError(
                'Custom generator function is required for CUSTOM tokenization method'
            )
        _check_index(index)
        token = custom_generator(index)
        if not isinstance(token, str):
            raise ConfigurationError(
                'Custom generator must return a string, got %s for index %d'
                % (type(token).__name__, index)
            )
        return token
    return generate_alphabetic_sequence(index)


original_generate_key_sequence = generate_alphabetic_sequence
