class KeyTokenError(Exception):
    """Base class for all key tokenization failures."""
    def __init__(self, message="Key tokenization failed"):
        super().__init__(message)


class UnsafeKeyError(KeyTokenError):
    """Raised when a key or token could corrupt the consuming object model."""
    def __init__(self, key=None, message=None):
        self.key = key
        if message is None:
            message = 'Unsafe key detected: %r' % (key,)
        super().__init__(message)


class StructuralValidationError(UnsafeKeyError):
    """Raised when a nested value holds an unsafe key at ``path``."""
    def __init__(self, key=None, path='root', message=None):
        self.path = path
        if message is None:
            message = (
                'Dangerous key detected at %s: %r. This key could lead to '
                'prototype pollution.' % (path, key)
            )
        super().__init__(key, message)


class CollisionError(KeyTokenError):
    """Raised when two keys, or two tokens, would share one dictionary slot."""
    def __init__(self, key=None, token=None, message=None):
        self.key = key
        self.token = token
        if message is None:
            message = 'Collision detected for key %r and token %r' % (key, token)
        super().__init__(message)


class ConfigurationError(KeyTokenError):
    """Raised when tokenization options or inputs are misconfigured."""
    def __init__(self, message="Invalid tokenization configuration"):
        super().__init__(message)
