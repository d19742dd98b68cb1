from enum import Enum


class EncodingMethod(Enum):
    ALPHABETIC = 'alphabetic'
    NUMERIC = 'numeric'
    PADDED_NUMERIC = 'padded_numeric'
    BASE64 = 'base64'
    SHORT_UNIQUE = 'uuid_short'
    CUSTOM = 'custom'

    @property
    def deterministic(self):
        """Whether ``build`` is a pure function of keys and options.

        ``SHORT_UNIQUE`` embeds the wall clock and ``CUSTOM`` delegates to an
        opaque function, so neither can promise identical output twice.
        """
        return self not in (EncodingMethod.SHORT_UNIQUE, EncodingMethod.CUSTOM)

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ALPHABETIC
        try:
            return cls(value)
        except ValueError:
            return cls.ALPHABETIC

    @classmethod
    def is_known(cls, value):
        if value is None or isinstance(value, cls):
            return True
        try:
            cls(value)
        except ValueError:
            return False
        return True


class TokenizationOptions:
    def __init__(
        self,
        method=EncodingMethod.ALPHABETIC,
        custom_generator=None,
        padding_length=4,
        prefix='',
    ):
        from .errors import ConfigurationError
        if custom_generator is not None and not callable(custom_generator):
            raise ConfigurationError('custom_generator must be callable')
        if (
            not isinstance(padding_length, int)
            or isinstance(padding_length, bool)
            or padding_length < 0
        ):
            raise ConfigurationError(
                'padding_length must be a non-negative integer, got %r' % (padding_length,)
            )
        if prefix is None:
            prefix = ''
        if not isinstance(prefix, str):
            raise ConfigurationError(
                'Prefix must be a string, got %s' % type(prefix).__name__
            )
        self.requested_method = method
        self.method = EncodingMethod.coerce(method)
        self.custom_generator = custom_generator
        self.padding_length = padding_length
        self.prefix = prefix

    @classmethod
    def from_value(cls, options=None, **overrides):
        from .errors import ConfigurationError
        if options is None:
            options = {}
        if isinstance(options, cls):
            if not overrides:
                return options
            options = options.as_dict()
        if not isinstance(options, dict):
            raise ConfigurationError(
                'options must be a dict or TokenizationOptions, got %s'
                % type(options).__name__
            )
        merged = dict(options)
        merged.update(overrides)
        try:
            return cls(**merged)
        except TypeError as exc:
            raise ConfigurationError('Unknown tokenization option: %s' % exc) from exc

    def as_dict(self):
        return {
            'method': self.requested_method,
            'custom_generator': self.custom_generator,
            'padding_length': self.padding_length,
            'prefix': self.prefix,
        }

    def __repr__(self):
        return 'TokenizationOptions(method=%s, padding_length=%d, prefix=%r)' % (
            self.method.value,
            self.padding_length,
            self.prefix,
        )


class Dictionary:
    """Immutable bidirectional mapping between source keys and tokens."""

    __slots__ = ('_forward', '_reverse', '_method')

    def __init__(self, forward, reverse, method=EncodingMethod.ALPHABETIC):
        from types import MappingProxyType
        forward = dict(forward)
        reverse = dict(reverse)
        if len(forward) != len(reverse):
            raise ValueError('forward and reverse mappings differ in size')
        for key, token in forward.items():
            if reverse.get(token) != key:
                raise ValueError('reverse mapping is not the inverse of forward for %r' % (key,))
        object.__setattr__(self, '_forward', MappingProxyType(forward))
        object.__setattr__(self, '_reverse', MappingProxyType(reverse))
        object.__setattr__(self, '_method', EncodingMethod.coerce(method))

    def __setattr__(self, name, value):
        raise AttributeError('Dictionary is immutable')

    def __delattr__(self, name):
        raise AttributeError('Dictionary is immutable')

    @property
    def forward(self):
        return self._forward

    @property
    def reverse(self):
        return self._reverse

    @property
    def method(self):
        return self._method

    @property
    def deterministic(self):
        return self._method.deterministic

    @property
    def size(self):
        return len(self._forward)

    def __len__(self):
        return self.size

    def token(self, key):
        return self._forward.get(key)

    def key(self, token):
        return self._reverse.get(token)

    def export(self):
        return [{'key': key, 'token': token} for key, token in self._forward.items()]

    def __eq__(self, other):
        if not isinstance(other, Dictionary):
            return NotImplemented
        return (
            self._method is other._method
            and list(self._forward.items()) == list(other._forward.items())
        )

    def __hash__(self):
        return hash((self._method, tuple(self._forward.items())))

    def __repr__(self):
        return 'Dictionary(method=%s, size=%d)' % (self._method.value, self.size)
