"""Key safety checks.

Tokenized payloads are frequently handed to JavaScript consumers, where a key
such as ``__proto__`` or ``toString`` rewrites or shadows inherited object
behaviour.  Every key that becomes a literal property name passes through
:func:`is_safe_key` before it is written.
"""

import re
from collections.abc import Mapping

DANGEROUS_KEYS = frozenset(('__proto__', 'constructor', 'prototype'))

DANGEROUS_PROPERTY_NAMES = frozenset((
    '__defineGetter__',
    '__defineSetter__',
    '__lookupGetter__',
    '__lookupSetter__',
    'hasOwnProperty',
    'isPrototypeOf',
    'propertyIsEnumerable',
    'toString',
    'valueOf',
    'toLocaleString',
))

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')


def _report_unsafe():
    from main import Reporter
    count = Reporter.report('unsafe_keys_detected') or 0
    Reporter.report(
        'unsafe_keys_detected',
        'Number of unsafe keys rejected by validation',
        count + 1,
    )


def is_safe_key(key):
    if not isinstance(key, str):
        return False
    if key in DANGEROUS_KEYS or key in DANGEROUS_PROPERTY_NAMES:
        return False
    if _CONTROL_CHARS.search(key):
        return False
    return True


def validate_dictionary_keys(mapping):
    """Raise :class:`UnsafeKeyError` for the first unsafe key of ``mapping``.

    Only the mapping's own keys are inspected; values are left alone.
    """
    from .errors import UnsafeKeyError
    for key in mapping.keys():
        if not is_safe_key(key):
            _report_unsafe()
            raise UnsafeKeyError(
                key,
                'Dangerous key detected in dictionary: %r. This key could lead '
                'to prototype pollution.' % (key,),
            )


def validate_object_keys(value, path='root'):
    """Walk ``value`` and raise on the first unsafe key, naming its path.

    Dict keys extend the path as ``path.key`` and sequence items as
    ``path[index]``, e.g. ``root.users[0].__proto__``.
    """
    from .errors import StructuralValidationError
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            validate_object_keys(item, '%s[%d]' % (path, index))
        return
    if not isinstance(value, Mapping):
        return
    for key, item in value.items():
        child = '%s.%s' % (path, key)
        if not is_safe_key(key):
            _report_unsafe()
            raise StructuralValidationError(key, child)
        validate_object_keys(item, child)


def create_safe_container():
    # Plain dict: item access never reaches methods, so 'toString' is just data.
    return {}


def safe_assign(container, key, value):
    from .errors import UnsafeKeyError
    if not is_safe_key(key):
        _report_unsafe()
        raise UnsafeKeyError(key, 'Cannot assign dangerous key: %r' % (key,))
    container[key] = value


def sanitize_object(value, remove_unsafe=True, throw_on_unsafe=False, deep=True):
    """Return a structural copy of ``value`` without unsafe keys.

    Unsafe keys are dropped by default.  With ``throw_on_unsafe`` set, or with
    ``remove_unsafe`` cleared, the first unsafe key raises
    :class:`UnsafeKeyError` instead, since it can never be kept.  Nested
    containers are only sanitised when ``deep`` is true; otherwise they are
    carried over as-is.
    """
    from .errors import UnsafeKeyError
    if isinstance(value, (list, tuple)):
        items = [
            sanitize_object(item, remove_unsafe, throw_on_unsafe, deep) if deep else item
            for item in value
        ]
        return tuple(items) if isinstance(value, tuple) else items
    if not isinstance(value, Mapping):
        return value
    result = create_safe_container()
    for key, item in value.items():
        if not is_safe_key(key):
            if throw_on_unsafe or not remove_unsafe:
                _report_unsafe()
                raise UnsafeKeyError(key, 'Unsafe key detected: %r' % (key,))
            continue
        if deep:
            item = sanitize_object(item, remove_unsafe, throw_on_unsafe, deep)
        result[key] = item
    return result


def validate_tokenization_input(value, mapping):
    from .errors import ConfigurationError, UnsafeKeyError
    validate_dictionary_keys(mapping)
    validate_object_keys(value)
    for key, token in mapping.items():
        if not isinstance(token, str):
            raise ConfigurationError(
                'Dictionary value for key %r must be a string, got %s'
                % (key, type(token).__name__)
            )
        if not is_safe_key(token):
            _report_unsafe()
            raise UnsafeKeyError(
                token,
                'Dictionary value %r for key %r is not safe and could lead to '
                'prototype pollution' % (token, key),
            )


def is_safe_object(value):
    from .errors import UnsafeKeyError
    if not isinstance(value, Mapping):
        return False
    try:
        validate_object_keys(value)
    except UnsafeKeyError:
        return False
    return True
