"""Request body serializers.

Objects are first reduced to plain mappings, lists and scalars so that pydantic
models, dataclasses, mappings and ordinary objects all serialize the same way.
"""

import base64
import dataclasses
import json
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator
from uuid import UUID

from pydantic import BaseModel

_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_SCALAR_TYPES = (str, int, float, bool, bytes, bytearray, Decimal, UUID)


def format_date(value: date | time, date_format: str | None) -> str:
    if date_format:
        return value.strftime(date_format)
    return value.isoformat()


def is_structured(value: Any) -> bool:
    if isinstance(value, (BaseModel, Mapping)):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    if isinstance(value, (Enum, type) + _SCALAR_TYPES + _SEQUENCE_TYPES):
        return False
    return hasattr(value, "__dict__")


def _restore_models(original: Any, dumped: Any) -> Any:
    # nested models whose dump is unchanged stay models so XML keeps their names
    if isinstance(original, BaseModel):
        if dumped == original.model_dump(by_alias=True):
            return original
        return dumped
    if (
        isinstance(original, _SEQUENCE_TYPES)
        and isinstance(dumped, (list, tuple))
        and len(original) == len(dumped)
    ):
        return [_restore_models(o, d) for o, d in zip(original, dumped)]
    return dumped


def public_items(obj: Any) -> Iterator[tuple[str, Any]]:
    """Yield the serializable ``(name, value)`` pairs of a structured object.

    Pydantic models go through ``model_dump(by_alias=True)`` so serialization
    aliases, field serializers, computed and excluded fields all apply.
    """
    if isinstance(obj, BaseModel):
        originals = {
            field.serialization_alias or field.alias or name: getattr(obj, name)
            for name, field in type(obj).model_fields.items()
        }
        for key, value in obj.model_dump(by_alias=True).items():
            if key in originals:
                value = _restore_models(originals[key], value)
            yield key, value
    elif isinstance(obj, Mapping):
        for key, value in obj.items():
            yield str(key), value
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        for field in dataclasses.fields(obj):
            yield field.name, getattr(obj, field.name)
    else:
        for key, value in vars(obj).items():
            if not key.startswith("_"):
                yield key, value


def to_plain(obj: Any, date_format: str | None = None) -> Any:
    """Reduce ``obj`` to JSON-compatible builtins."""
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, Enum):
        return to_plain(obj.value, date_format)
    if isinstance(obj, (datetime, date, time)):
        return format_date(obj, date_format)
    if isinstance(obj, (Decimal, UUID)):
        return str(obj)
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(obj).decode("ascii")
    if isinstance(obj, _SEQUENCE_TYPES):
        return [to_plain(item, date_format) for item in obj]
    if is_structured(obj):
        return {key: to_plain(value, date_format) for key, value in public_items(obj)}
    return str(obj)


def to_text(value: Any, date_format: str | None = None) -> str:
    """Render a scalar the way it appears in XML text and form fields."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return to_text(value.value, date_format)
    if isinstance(value, (datetime, date, time)):
        return format_date(value, date_format)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    return str(value)


def serialize_json(obj: Any, date_format: str | None = None) -> str:
    return json.dumps(to_plain(obj, date_format))


def element_name(obj: Any) -> str:
    if isinstance(obj, Mapping):
        return "root"
    return type(obj).__name__


def _fill_element(element: ET.Element, value: Any, date_format: str | None) -> None:
    if value is None:
        return

    if isinstance(value, _SEQUENCE_TYPES):
        for item in value:
            if item is None:
                continue
            child = ET.SubElement(element, element_name(item))
            _fill_element(child, item, date_format)
        return

    if is_structured(value):
        for key, item in public_items(value):
            if item is None:
                continue
            child = ET.SubElement(element, key)
            _fill_element(child, item, date_format)
        return

    element.text = to_text(value, date_format)


def serialize_xml(
    obj: Any,
    xml_namespace: str | None = None,
    date_format: str | None = None,
    root_name: str | None = None,
) -> str:
    """Serialize ``obj`` to an XML document.

    The root element is named after the object's type unless ``root_name`` is
    given. Sequence members become child elements named after their type.
    """
    root = ET.Element(root_name or element_name(obj))
    if xml_namespace:
        root.set("xmlns", xml_namespace)
    _fill_element(root, obj, date_format)
    return ET.tostring(root, encoding="unicode")


def flatten_object(
    obj: Any,
    included_properties: tuple[str, ...] = (),
    date_format: str | None = None,
) -> list[tuple[str, str]]:
    """Flatten the public fields of ``obj`` into name/value pairs.

    ``None`` values are skipped and sequences are joined with commas.
    """
    if not is_structured(obj):
        raise TypeError(f"Cannot read fields from a {type(obj).__name__}")

    pairs: list[tuple[str, str]] = []
    for key, value in public_items(obj):
        if included_properties and key not in included_properties:
            continue
        if value is None:
            continue
        if isinstance(value, _SEQUENCE_TYPES):
            text = ",".join(to_text(item, date_format) for item in value)
        else:
            text = to_text(value, date_format)
        pairs.append((key, text))
    return pairs
