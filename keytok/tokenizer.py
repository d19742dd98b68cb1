class KeyTransformer:
    """Rewrite the object keys of a nested value through a mapping.

    Values are never touched; only the keys that carry them.  Keys missing
    from the mapping pass through unchanged, so a dictionary built for a
    subset of a document's keys can still be applied to the whole document.
    """

    def __init__(self, reporter=None):
        self._reporter = reporter

    @property
    def reporter(self):
        return self._reporter

    def tokenize(self, value, forward):
        mapping = self._mapping(forward, 'forward')
        return self._run(value, mapping, 'tokenize_calls', 'tokenize')

    def detokenize(self, value, reverse):
        mapping = self._mapping(reverse, 'reverse')
        return self._run(value, mapping, 'detokenize_calls', 'detokenize')

    @staticmethod
    def _mapping(mapping, direction):
        from .core import Dictionary
        from .errors import ConfigurationError
        if isinstance(mapping, Dictionary):
            return getattr(mapping, direction)
        if not hasattr(mapping, 'items') or not hasattr(mapping, 'get'):
            raise ConfigurationError(
                'A mapping or Dictionary is required, got %s' % type(mapping).__name__
            )
        return mapping

    def _run(self, value, mapping, metric, operation):
        from .safety import validate_tokenization_input
        validate_tokenization_input(value, mapping)
        stats = {'substituted': 0, 'passed': 0, 'depth': 0}
        result = self._transform(value, mapping, stats, 1)
        if self._reporter:
            self._report_add(
                'keys_substituted',
                'Number of keys replaced through a mapping',
                stats['substituted'],
            )
            self._report_add(
                'keys_passed_through',
                'Number of keys absent from the mapping',
                stats['passed'],
            )
            previous = self._reporter.report('max_recursion_depth') or 0
            if stats['depth'] > previous:
                self._reporter.report(
                    'max_recursion_depth',
                    'Maximum recursion depth encountered during key transformation',
                    stats['depth'],
                )
            self._report_add(metric, 'Number of %s operations' % operation, 1)
        return result

    def _report_add(self, name, description, amount):
        count = self._reporter.report(name) or 0
        self._reporter.report(name, description, count + amount)

    def _transform(self, value, mapping, stats, depth):
        from collections.abc import Mapping
        from .safety import create_safe_container, safe_assign
        if depth > stats['depth']:
            stats['depth'] = depth
        if isinstance(value, list):
            return [self._transform(item, mapping, stats, depth + 1) for item in value]
        if isinstance(value, tuple):
            return tuple(self._transform(item, mapping, stats, depth + 1) for item in value)
        if not isinstance(value, Mapping):
            return value
        result = create_safe_container()
        for key, item in value.items():
            target = mapping.get(key)
            if target is None:
                target = key
                stats['passed'] += 1
            else:
                stats['substituted'] += 1
            # A token equal to an unmapped sibling key is overwritten by whichever comes later.
            safe_assign(result, target, self._transform(item, mapping, stats, depth + 1))
        return result


def tokenize(value, forward, reporter=None):
    """Replace the keys of ``value`` using ``forward`` (key -> token)."""
    return KeyTransformer(reporter).tokenize(value, forward)


def detokenize(value, reverse, reporter=None):
    """Restore the keys of ``value`` using ``reverse`` (token -> key)."""
    return KeyTransformer(reporter).detokenize(value, reverse)
