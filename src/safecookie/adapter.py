# file: safecookie/adapter.py
"""
Typed payloads for sealed cookies.

A payload adapter turns a registered dataclass instance into bytes before
sealing and back after opening. Types are looked up in a TypeRegistry the
caller builds and passes in; there is no global registry.

Wire structure (JSON shown):
    {"data": {...fields...}, "type": "<tag>"}
"""

import dataclasses
import json
import logging
import os
from typing import Any, Dict, Optional, Type

import yaml

from .binding import Context, RandomSource, SafeCookie
from .config import resolve_config
from .crypto_errors import DeserializationError, SerializationError


logger = logging.getLogger(__name__)


class TypeRegistry:
    """Mapping between type tags and dataclass types."""

    def __init__(self):
        self._by_tag: Dict[str, type] = {}
        self._by_type: Dict[type, str] = {}

    def register(self, cls: Optional[type] = None, *, tag: Optional[str] = None):
        """
        Register a dataclass under `tag` (defaults to the class name).

        Usable directly or as a decorator:

            >>> registry = TypeRegistry()
            >>> @registry.register
            ... @dataclass
            ... class Session:
            ...     user_id: int
        """
        def _register(target: type) -> type:
            if not (isinstance(target, type) and dataclasses.is_dataclass(target)):
                raise TypeError(f"Only dataclasses can be registered, got {target!r}")
            name = tag or target.__name__
            if name in self._by_tag:
                raise ValueError(f"Tag already registered: {name}")
            if target in self._by_type:
                raise ValueError(f"Type already registered: {target.__name__}")
            self._by_tag[name] = target
            self._by_type[target] = name
            return target

        if cls is None:
            return _register
        return _register(cls)

    def tag_for(self, cls: type) -> str:
        try:
            return self._by_type[cls]
        except KeyError:
            raise SerializationError(f"Unregistered type: {cls.__name__}") from None

    def type_for(self, tag: str) -> type:
        try:
            return self._by_tag[tag]
        except (KeyError, TypeError):
            raise DeserializationError(f"Unknown type tag: {tag!r}") from None

    def __contains__(self, cls: type) -> bool:
        return cls in self._by_type

    def __len__(self) -> int:
        return len(self._by_tag)


class PayloadAdapter:
    """
    Base adapter: tagged envelope handling shared by every format.

    Subclasses implement _dumps and _loads.
    """

    format_name = None

    def __init__(self, registry: TypeRegistry):
        self.registry = registry

    def _dumps(self, document: Dict[str, Any]) -> bytes:
        raise NotImplementedError

    def _loads(self, data: bytes) -> Any:
        raise NotImplementedError

    def marshal(self, value: Any) -> bytes:
        """
        Serialize a registered dataclass instance.

        Raises:
            SerializationError: If the type is unregistered or a field
                                cannot be encoded
        """
        if not dataclasses.is_dataclass(value) or isinstance(value, type):
            raise SerializationError(
                f"Payload must be a dataclass instance, got {type(value).__name__}"
            )
        tag = self.registry.tag_for(type(value))
        document = {"type": tag, "data": dataclasses.asdict(value)}
        return self._dumps(document)

    def unmarshal(self, data: bytes, shape: Optional[Type] = None) -> Any:
        """
        Rebuild a value from authenticated bytes.

        Args:
            data: Bytes produced by marshal()
            shape: Expected registered class, or None for any registered type

        Raises:
            DeserializationError: If the bytes do not describe a value of `shape`
        """
        document = self._loads(data)
        if not isinstance(document, dict) or set(document) != {"type", "data"}:
            raise DeserializationError("Payload is not a tagged document")

        cls = self.registry.type_for(document["type"])
        if shape is not None and cls is not shape:
            raise DeserializationError(
                f"Expected {shape.__name__}, got {cls.__name__}"
            )

        fields = document["data"]
        if not isinstance(fields, dict):
            raise DeserializationError("Payload data is not a mapping")
        expected = {f.name for f in dataclasses.fields(cls) if f.init}
        unknown = set(fields) - expected
        if unknown:
            raise DeserializationError(
                f"Unknown fields for {cls.__name__}: {', '.join(sorted(map(str, unknown)))}"
            )

        try:
            return cls(**fields)
        except (TypeError, ValueError) as e:
            raise DeserializationError(f"Cannot build {cls.__name__}: {e}") from e


class JsonPayloadAdapter(PayloadAdapter):
    """Canonical JSON (sorted keys, compact separators)."""

    format_name = "json"

    def _dumps(self, document):
        try:
            text = json.dumps(
                document, sort_keys=True, separators=(",", ":"), allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode payload as JSON: {e}") from e
        return text.encode("utf-8")

    def _loads(self, data):
        try:
            return json.loads(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise DeserializationError(f"Invalid JSON payload: {e}") from e


class YamlPayloadAdapter(PayloadAdapter):
    """YAML via safe_dump / safe_load."""

    format_name = "yaml"

    def _dumps(self, document):
        try:
            text = yaml.safe_dump(document, sort_keys=True, default_flow_style=True)
        except yaml.YAMLError as e:
            raise SerializationError(f"Cannot encode payload as YAML: {e}") from e
        return text.encode("utf-8")

    def _loads(self, data):
        try:
            return yaml.safe_load(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise DeserializationError(f"Invalid YAML payload: {e}") from e


ADAPTERS = {
    adapter_cls.format_name: adapter_cls
    for adapter_cls in (JsonPayloadAdapter, YamlPayloadAdapter)
}


class TypedSafeCookie:
    """
    SafeCookie composed with a PayloadAdapter.

    Deserialization failures after successful authentication raise
    DeserializationError, distinct from InvalidCookieError.
    """

    def __init__(self, binding: SafeCookie, adapter: PayloadAdapter):
        self.binding = binding
        self.adapter = adapter

    def seal(self, value: Any, context: Context) -> str:
        """Marshal `value` and seal it bound to `context`."""
        return self.binding.seal(self.adapter.marshal(value), context)

    def open(self, token: str, context: Context, shape: Optional[Type] = None) -> Any:
        """
        Open `token` and unmarshal the payload.

        Raises:
            InvalidCookieError: If the token does not authenticate
            DeserializationError: If it authenticates but is not a `shape`
        """
        payload = self.binding.open(token, context)
        try:
            return self.adapter.unmarshal(payload, shape)
        except DeserializationError as e:
            logger.warning(
                "Authenticated %s cookie failed to deserialize: %s",
                self.adapter.format_name, e,
            )
            raise


def build_typed(
    key: bytes,
    registry: TypeRegistry,
    config: Optional[Dict[str, Any]] = None,
    random_source: RandomSource = os.urandom,
) -> TypedSafeCookie:
    """Build a TypedSafeCookie from a configuration dictionary."""
    config = resolve_config(config)
    binding = SafeCookie.from_config(key, config, random_source=random_source)
    adapter_cls = ADAPTERS[config["safecookie"]["payload_format"]]
    return TypedSafeCookie(binding, adapter_cls(registry))
