"""
Photo result decoding: one photo object of the listing API -> PhotoResult.

Wire shape (one array element of GET /photos):
  {
    "id": str, "width": int, "height": int, "created_at": str,
    "description": str | null (optional), "liked_by_user": bool,
    "urls": {"thumb": str, "full": str}
  }

Wire keys are renamed to attribute names only through the tables below.
URL strings are kept as-is; checking they resolve is up to the consumer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class SchemaViolation(ValueError):
    """A required key is missing or a value has the wrong JSON type."""

    def __init__(self, field: str, expected: str, observed: str, path: str | None = None):
        self.field = field
        self.expected = expected
        self.observed = observed
        self.path = path or field
        super().__init__(f"{self.path}: expected {expected}, got {observed}")

    def with_prefix(self, prefix: str) -> SchemaViolation:
        """Same violation, located under `prefix` (e.g. an array index)."""
        if self.path == "$":
            return SchemaViolation(self.field, self.expected, self.observed, prefix)
        sep = "" if self.path.startswith("[") else "."
        return SchemaViolation(self.field, self.expected, self.observed, f"{prefix}{sep}{self.path}")


@dataclass(frozen=True)
class PhotoUrls:
    thumb: str
    full: str


@dataclass(frozen=True)
class PhotoResult:
    id: str
    width: int
    height: int
    created_at: str
    description: str | None
    liked_by_user: bool
    urls: PhotoUrls


# (wire key, attribute name, JSON type, required)
PHOTO_RESULT_FIELDS: tuple[tuple[str, str, str, bool], ...] = (
    ("id", "id", "string", True),
    ("width", "width", "integer", True),
    ("height", "height", "integer", True),
    ("created_at", "created_at", "string", True),
    ("description", "description", "string", False),
    ("liked_by_user", "liked_by_user", "boolean", True),
    ("urls", "urls", "object", True),
)

PHOTO_URLS_FIELDS: tuple[tuple[str, str, str, bool], ...] = (
    ("thumb", "thumb", "string", True),
    ("full", "full", "string", True),
)


def json_type_name(value: Any) -> str:
    """Name of the JSON type of a decoded value ("missing" is used for absent keys)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _decode_fields(
    obj: dict[str, Any],
    table: tuple[tuple[str, str, str, bool], ...],
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for wire_key, attr, expected, required in table:
        if wire_key not in obj or (obj[wire_key] is None and not required):
            if required:
                raise SchemaViolation(wire_key, expected, "missing")
            values[attr] = None
            continue
        value = obj[wire_key]
        observed = json_type_name(value)
        if observed != expected:
            raise SchemaViolation(wire_key, expected, observed)
        values[attr] = value
    return values


def _decode_urls(obj: Any) -> PhotoUrls:
    if not isinstance(obj, dict):
        raise SchemaViolation("urls", "object", json_type_name(obj))
    try:
        return PhotoUrls(**_decode_fields(obj, PHOTO_URLS_FIELDS))
    except SchemaViolation as exc:
        raise exc.with_prefix("urls") from None


def decode_photo_result(obj: Any) -> PhotoResult:
    """Decode one photo object. Raises SchemaViolation naming the failing key."""
    if not isinstance(obj, dict):
        raise SchemaViolation("$", "object", json_type_name(obj))

    values = _decode_fields(obj, PHOTO_RESULT_FIELDS)
    if not values["id"]:
        raise SchemaViolation("id", "non-empty string", "empty string")
    for key in ("width", "height"):
        if values[key] < 0:
            raise SchemaViolation(key, "non-negative integer", f"integer {values[key]}")
    values["urls"] = _decode_urls(values["urls"])
    return PhotoResult(**values)


def decode_photo_results(items: Any) -> list[PhotoResult]:
    """Decode a page (JSON array) of photo objects; fails on the first bad element."""
    if not isinstance(items, list):
        raise SchemaViolation("$", "array", json_type_name(items))
    results = []
    for index, item in enumerate(items):
        try:
            results.append(decode_photo_result(item))
        except SchemaViolation as exc:
            raise exc.with_prefix(f"[{index}]") from None
    return results
