class DictionaryBuilder:
    """Assign each key of an ordered list a unique, safe token.

    Position in ``keys`` decides the token, so callers control the mapping by
    controlling the order.  Duplicate keys, duplicate tokens and unsafe keys
    or tokens abort the build; no partial dictionary is returned.
    """

    def __init__(self, options=None, reporter=None, **overrides):
        from .core import TokenizationOptions
        self._options = TokenizationOptions.from_value(options, **overrides)
        self._reporter = reporter

    @property
    def options(self):
        return self._options

    @property
    def reporter(self):
        return self._reporter

    def _check_keys(self, keys):
        from .errors import ConfigurationError, UnsafeKeyError
        from .safety import is_safe_key
        if not isinstance(keys, (list, tuple)):
            raise ConfigurationError(
                'Keys must be provided as an ordered list, got %s' % type(keys).__name__
            )
        for key in keys:
            if not isinstance(key, str):
                raise ConfigurationError(
                    'All keys must be strings, got %s: %r' % (type(key).__name__, key)
                )
            if not is_safe_key(key):
                raise UnsafeKeyError(
                    key,
                    'Unsafe key detected in input: %r. This key could lead to '
                    'prototype pollution.' % (key,),
                )

    def _report_collision(self):
        if self._reporter:
            count = self._reporter.report('token_collisions') or 0
            self._reporter.report(
                'token_collisions',
                'Number of duplicate keys or tokens rejected during builds',
                count + 1,
            )

    def build(self, keys):
        from .core import Dictionary
        from .errors import CollisionError, UnsafeKeyError
        from .safety import is_safe_key
        from .sequence import generate_key_sequence
        self._check_keys(keys)
        options = self._options
        forward = {}
        reverse = {}
        for index, key in enumerate(keys):
            base = generate_key_sequence(
                index,
                options.requested_method,
                padding_length=options.padding_length,
                custom_generator=options.custom_generator,
                reporter=self._reporter,
            )
            token = options.prefix + base
            if not is_safe_key(token):
                raise UnsafeKeyError(
                    token,
                    'Generated token %r for key %r is not safe. Consider using a '
                    'different tokenization method or prefix.' % (token, key),
                )
            if key in forward:
                self._report_collision()
                raise CollisionError(key, token, 'Duplicate key detected: %r' % (key,))
            if token in reverse:
                self._report_collision()
                raise CollisionError(
                    key,
                    token,
                    'Token collision detected: %r would be assigned to both %r and %r'
                    % (token, reverse[token], key),
                )
            forward[key] = token
            reverse[token] = key
        dictionary = Dictionary(forward, reverse, options.method)
        if self._reporter:
            self._reporter.report(
                'dictionary_size',
                'Number of entries in the generated dictionary',
                dictionary.size,
            )
            count = self._reporter.report('dictionary_builds') or 0
            self._reporter.report(
                'dictionary_builds', 'Number of dictionaries built', count + 1
            )
        return dictionary


def generate_dictionary(keys, options=None, reporter=None, **overrides):
    """Build a :class:`~keytok.core.Dictionary` for ``keys``.

    ``options`` may be a :class:`~keytok.core.TokenizationOptions` or a dict
    of its keyword arguments; keyword ``overrides`` take precedence.

    >>> generate_dictionary(['name', 'age'], method='numeric', prefix='num_').forward
    mappingproxy({'name': 'num_0', 'age': 'num_1'})
    """
    return DictionaryBuilder(options, reporter=reporter, **overrides).build(keys)


def generate_alphabetic_dictionary(keys):
    from .core import EncodingMethod
    return generate_dictionary(keys, method=EncodingMethod.ALPHABETIC)


def collect_keys(value):
    """Return every string key of ``value`` in breadth-first, first-seen order."""
    from collections import deque
    from collections.abc import Mapping
    seen = {}
    queue = deque([value])
    while queue:
        item = queue.popleft()
        if isinstance(item, Mapping):
            for key, child in item.items():
                if isinstance(key, str) and key not in seen:
                    seen[key] = None
                queue.append(child)
        elif isinstance(item, (list, tuple)):
            queue.extend(item)
    return list(seen)
