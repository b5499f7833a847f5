"""
Response envelope parsing and typed extraction.

Vault wraps nearly every reply in the same outer structure::

    {"data": {...} | null, "warnings": ["..."], "auth": {...} | null, ...}

:class:`ResponseEnvelope` captures that structure once per HTTP call and
offers helpers to pull typed values back out of it. The decoded JSON held by
an envelope is read-only: objects become ``MappingProxyType`` views and
arrays become tuples.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from .exceptions import FieldNotFoundError, ParseError

T = TypeVar("T")


class _NotFound:
    """Marker returned when a property is absent, as opposed to present and null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def parse_json(text: str) -> Any:
    """Decode a JSON document, raising :class:`ParseError` on malformed input."""
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Unable to parse JSON response: {e}")


def freeze_json(value: Any) -> Any:
    """Return a read-only copy of a decoded JSON value."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_json(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_json(v) for v in value)
    return value


def thaw_json(value: Any) -> Any:
    """Return a plain, mutable ``dict``/``list`` copy of a frozen JSON value."""
    if isinstance(value, Mapping):
        return {k: thaw_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_json(v) for v in value]
    return value


def get_json_property_value(package: Any, key: str) -> Any:
    """
    Return the value of ``key`` inside a decoded JSON package.

    Nested members are addressed with dots, e.g. ``"data.keys"``.

    Returns:
        The raw decoded value (which may be ``None``), or :data:`NOT_FOUND`
        if any component of the key is missing.
    """
    value = package
    for component in key.split("."):
        if not isinstance(value, Mapping) or component not in value:
            return NOT_FOUND
        value = value[component]
    return value


def validate_as(shape: Any, value: Any, what: str = "value") -> Any:
    """Validate a decoded JSON value into ``shape`` via pydantic."""
    try:
        return TypeAdapter(shape).validate_python(thaw_json(value))
    except ValidationError as e:
        raise ParseError(f"Unable to convert {what} into {getattr(shape, '__name__', shape)}: {e}")


def convert_json_array_to_list(
    json_text: str,
    item_type: Type[T] = str,
    field: Optional[str] = None,
) -> List[T]:
    """
    Parse a JSON array into a list of ``item_type``.

    Args:
        json_text: JSON text holding an array, or an object holding one
        item_type: Type each element is validated into
        field: Optional (dotted) member of the object that holds the array

    Raises:
        ParseError: The text is not JSON, the array is missing, or an element
            does not match ``item_type``. No partial list is ever returned.
    """
    decoded = parse_json(json_text)
    if field is not None:
        decoded = get_json_property_value(decoded, field)
        if decoded is NOT_FOUND:
            raise FieldNotFoundError(f"Field {field} not found.")
    if not isinstance(decoded, list):
        raise ParseError(f"Expected a JSON array but received {type(decoded).__name__}")
    return validate_as(List[item_type], decoded, "JSON array")


@dataclass(frozen=True)
class ResponseEnvelope:
    """The parsed outer structure of one Vault HTTP response."""

    success: bool
    http_status_code: int
    data_package: Any = None
    warnings: Tuple[str, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        object.__setattr__(self, "data_package", freeze_json(self.data_package))
        object.__setattr__(self, "raw", freeze_json(self.raw))

    @classmethod
    def from_body(cls, status_code: int, body_text: str) -> "ResponseEnvelope":
        """
        Build an envelope from an HTTP status and body.

        An empty body (204 No Content) yields an envelope with no data.

        Raises:
            ParseError: The body is not a JSON object.
        """
        success = 200 <= status_code < 300
        if not body_text or not body_text.strip():
            return cls(success=success, http_status_code=status_code)

        decoded = parse_json(body_text)
        if not isinstance(decoded, dict):
            raise ParseError(f"Expected a JSON object response but received {type(decoded).__name__}")

        warnings = decoded.get("warnings") or []
        if not isinstance(warnings, list):
            warnings = [warnings]

        return cls(
            success=success,
            http_status_code=status_code,
            data_package=decoded.get("data"),
            warnings=tuple(str(w) for w in warnings),
            raw=decoded,
        )

    @property
    def has_data(self) -> bool:
        return self.data_package is not None

    def get_data_package_as_json(self, required: bool = True) -> Any:
        """
        Return a mutable copy of the ``data`` member of the response.

        Raises:
            FieldNotFoundError: ``required`` is set and there is no data.
        """
        if self.data_package is None and required:
            raise FieldNotFoundError(
                f"Response (HTTP {self.http_status_code}) did not contain a data package."
            )
        return thaw_json(self.data_package)

    def get_field(self, key: str) -> Any:
        """Return a (dotted) member of the whole response, or :data:`NOT_FOUND`."""
        return get_json_property_value(self.raw, key)

    def get_data_field(self, key: str) -> Any:
        """Return a (dotted) member of the data package, or :data:`NOT_FOUND`."""
        return get_json_property_value(self.data_package, key)

    def get_vault_typed_object(self, shape: Type[T], field: str = "data") -> T:
        """
        Validate a member of the response into ``shape``.

        Unknown members are ignored by the target model; missing optional
        members take the model's defaults.

        Args:
            shape: A pydantic model or any type pydantic can validate
            field: (Dotted) member of the response to convert. Defaults to
                the data package.

        Raises:
            FieldNotFoundError: The member is absent or null.
            ParseError: The member does not match ``shape``.
        """
        value = self.get_field(field)
        if value is NOT_FOUND or value is None:
            raise FieldNotFoundError(f"Field {field} not found.")
        return validate_as(shape, value, f"field {field}")

    def get_list(self, item_type: Type[T] = str, field: str = "data.keys") -> List[T]:
        """Return a list member of the response, e.g. the keys of a LIST call."""
        value = self.get_field(field)
        if value is NOT_FOUND or value is None:
            raise FieldNotFoundError(f"Field {field} not found.")
        if not isinstance(value, tuple):
            raise ParseError(f"Field {field} is not a JSON array")
        return validate_as(List[item_type], value, f"field {field}")
