from collections.abc import Mapping

ARRAY_TAG = "__ndarray__"
TENSOR_TAG = "__torch_tensor__"
ESCAPE_TAG = "__json_dict__"
RESERVED_TAGS = frozenset((ARRAY_TAG, TENSOR_TAG, ESCAPE_TAG))


class JsonSerializer:
    """Compact JSON encoding for tokenized payloads.

    Tokenization leaves values untouched, so numpy arrays and torch tensors
    survive it as opaque values; they are tagged here so that a decode
    restores them with dtype and device intact.  A plain dict that already
    holds one of the tag keys is wrapped under ``__json_dict__`` so that it
    decodes back to a dict.
    """

    def serialize(self, obj):
        import json
        data = json.dumps(self._tag(obj), separators=(",", ":"), ensure_ascii=False)
        return data.encode("utf-8")

    def deserialize(self, stream):
        import json
        if isinstance(stream, (bytes, bytearray)):
            stream = bytes(stream).decode("utf-8")
        return self._untag(json.loads(stream))

    def _tag(self, obj):
        import numpy as np
        import torch
        if isinstance(obj, np.ndarray):
            return {ARRAY_TAG: obj.tolist(), "dtype": str(obj.dtype)}
        if isinstance(obj, np.generic):
            return obj.item()
        if isinstance(obj, torch.Tensor):
            return {
                TENSOR_TAG: obj.tolist(),
                "dtype": str(obj.dtype),
                "device": str(obj.device),
                "requires_grad": obj.requires_grad,
            }
        if isinstance(obj, (list, tuple)):
            return [self._tag(item) for item in obj]
        if isinstance(obj, Mapping):
            result = {key: self._tag(value) for key, value in obj.items()}
            if RESERVED_TAGS.intersection(result):
                return {ESCAPE_TAG: result}
            return result
        return obj

    def _untag(self, obj):
        import numpy as np
        import torch
        if isinstance(obj, list):
            return [self._untag(item) for item in obj]
        if not isinstance(obj, dict):
            return obj
        if len(obj) == 1 and ESCAPE_TAG in obj and isinstance(obj[ESCAPE_TAG], dict):
            return {key: self._untag(value) for key, value in obj[ESCAPE_TAG].items()}
        if ARRAY_TAG in obj:
            return np.array(obj[ARRAY_TAG], dtype=obj.get("dtype"))
        if TENSOR_TAG in obj:
            dtype_name = obj.get("dtype", "torch.float32")
            dtype = getattr(torch, dtype_name.split(".")[-1], None)
            if not isinstance(dtype, torch.dtype):
                raise ValueError("Unknown tensor dtype %r" % (dtype_name,))
            return torch.tensor(
                obj[TENSOR_TAG],
                dtype=dtype,
                device=torch.device(obj.get("device", "cpu")),
                requires_grad=obj.get("requires_grad", False),
            )
        return {key: self._untag(value) for key, value in obj.items()}


class TokenizationResult:
    def __init__(self, encoded, dictionary):
        self.encoded = encoded
        self.dictionary = dictionary

    def __repr__(self):
        return "TokenizationResult(encoded=%r, dictionary=%r)" % (
            self.encoded,
            self.dictionary,
        )


class TokenizationPipeline:
    """Keep a dictionary and the latest input in step with each other.

    A provided ``dictionary`` wins over ``keys``.  Without either, the keys
    are collected from each input when ``infer_keys`` is set; otherwise
    encoding fails with :class:`~keytok.errors.ConfigurationError`.
    """

    def __init__(
        self,
        keys=None,
        dictionary=None,
        auto_tokenize=True,
        infer_keys=False,
        *,
        serializer=None,
        reporter=None,
        options=None,
        **overrides,
    ):
        from .core import Dictionary, TokenizationOptions
        from .errors import ConfigurationError
        from .tokenizer import KeyTransformer
        if dictionary is not None and not isinstance(dictionary, Dictionary):
            raise ConfigurationError(
                "dictionary must be a Dictionary, got %s" % type(dictionary).__name__
            )
        self._reporter = self._instantiate_reporter(reporter)
        self._options = TokenizationOptions.from_value(options, **overrides)
        self._serializer = serializer if serializer is not None else JsonSerializer()
        self._transformer = KeyTransformer(self._reporter)
        self._keys = keys if keys else []
        self._provided = dictionary
        self._auto_tokenize = auto_tokenize
        self._infer_keys = infer_keys
        self._dictionary = self._resolve_dictionary()
        self._input = None
        self._tokenized = None
        self._detokenized = None

    def _instantiate_reporter(self, reporter):
        if reporter is None:
            reporter = __import__("main").Reporter
        if isinstance(reporter, type):
            reporter = reporter()
        return reporter

    def _resolve_dictionary(self, value=None):
        from .dictionary import DictionaryBuilder, collect_keys
        if self._provided is not None:
            return self._provided
        builder = DictionaryBuilder(self._options, reporter=self._reporter)
        if self._keys:
            return builder.build(self._keys)
        if self._infer_keys and value is not None:
            return builder.build(collect_keys(value))
        return None

    def _count_failure(self):
        count = self._reporter.report("pipeline_failures") or 0
        self._reporter.report(
            "pipeline_failures", "Number of failed pipeline operations", count + 1
        )

    @property
    def reporter(self):
        return self._reporter

    @property
    def serializer(self):
        return self._serializer

    @property
    def options(self):
        return self._options

    @property
    def dictionary(self):
        return self._dictionary

    @property
    def input(self):
        return self._input

    @property
    def tokenized(self):
        return self._tokenized

    @property
    def detokenized(self):
        return self._detokenized

    def encode(self, value):
        from .errors import ConfigurationError
        from .safety import validate_object_keys
        try:
            validate_object_keys(value)
            if self._infer_keys and not self._keys and self._provided is None:
                self._dictionary = self._resolve_dictionary(value)
            if self._dictionary is None:
                raise ConfigurationError(
                    "No dictionary available. Provide keys or a dictionary."
                )
            encoded = self._transformer.tokenize(value, self._dictionary.forward)
        except Exception:
            self._tokenized = None
            self._count_failure()
            raise
        self._tokenized = encoded
        return TokenizationResult(encoded, self._dictionary)

    def decode(self, data):
        from .errors import ConfigurationError
        if isinstance(data, TokenizationResult):
            dictionary = data.dictionary
            data = data.encoded
        else:
            dictionary = self._dictionary
        try:
            if dictionary is None:
                raise ConfigurationError("No dictionary available for detokenization.")
            decoded = self._transformer.detokenize(data, dictionary.reverse)
        except Exception:
            self._count_failure()
            raise
        self._detokenized = decoded
        return decoded

    def encode_bytes(self, value):
        result = self.encode(value)
        stream = self._serializer.serialize(result.encoded)
        plain = self._serializer.serialize(value)
        self._reporter.report(
            "encoded_bytes", "Size of the tokenized payload in bytes", len(stream)
        )
        ratio = len(stream) / len(plain) if plain else 0
        self._reporter.report(
            "compression_ratio", "Tokenized byte length to plain byte length ratio", ratio
        )
        return stream

    def decode_bytes(self, stream):
        return self.decode(self._serializer.deserialize(stream))

    def update(self, value):
        """Record a new input and re-tokenize it when auto tokenization is on."""
        self._input = value
        self._detokenized = value
        if self._auto_tokenize and value is not None and (
            self._dictionary is not None or self._infer_keys
        ):
            return self.encode(value).encoded
        return self._tokenized

    def reset(self):
        self._tokenized = None
        self._detokenized = self._input
