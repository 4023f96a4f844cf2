"""Tolerant conversion of response content into typed shapes.

Content is parsed into plain mappings, lists and scalars first. Declared
fields are then looked up one by one: missing or null values keep the field's
default, undeclared keys are ignored. Only content that does not parse, or a
value that cannot be coerced to its declared type, is an error.
"""

import dataclasses
import json
import types
import typing
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from logging import getLogger
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from pydantic import AliasChoices, BaseModel, TypeAdapter, ValidationError

from ._utils.constants import LOGGER_NAME
from .models.errors import DeserializationError
from .models.parameters import DataFormat
from .models.response import WebResponse

T = TypeVar("T")

logger = getLogger(LOGGER_NAME)

_LIST_ORIGINS = (list, tuple, set, frozenset)


class XmlNode(dict):
    """Mapping built from an XML element with children or attributes."""


def detect_format(content_type: str | None) -> DataFormat:
    if content_type and "xml" in content_type.lower():
        return DataFormat.XML
    return DataFormat.JSON


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _element_to_tree(element: ET.Element) -> Any:
    children = list(element)
    text = element.text.strip() if element.text and element.text.strip() else None
    if not children and not element.attrib:
        return text

    node = XmlNode()
    for key, value in element.attrib.items():
        node[_local_name(key)] = value
    if text is not None and not children:
        node["value"] = text

    repeated: set[str] = set()
    for child in children:
        key = _local_name(child.tag)
        value = _element_to_tree(child)
        if key in repeated:
            node[key].append(value)
        elif key in node:
            node[key] = [node[key], value]
            repeated.add(key)
        else:
            node[key] = value
    return node


def _parse_xml(content: str, root_element: str | None) -> Any:
    root = ET.fromstring(content)
    if root_element:
        match = next(
            (el for el in root.iter() if _local_name(el.tag) == root_element), None
        )
        if match is not None:
            root = match
    return _element_to_tree(root)


def _parse_json(content: str, root_element: str | None) -> Any:
    payload = json.loads(content)
    if root_element and isinstance(payload, Mapping) and root_element in payload:
        return payload[root_element]
    return payload


def _normalize_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()


def _lookup(raw: Mapping, candidates: tuple[str | None, ...]) -> tuple[bool, Any]:
    names = [c for c in candidates if c]
    for name in names:
        if name in raw:
            return True, raw[name]

    wanted = {_normalize_key(name) for name in names}
    for key, value in raw.items():
        if isinstance(key, str) and _normalize_key(key) in wanted:
            return True, value
    return False, None


def _allows_none(annotation: Any) -> bool:
    if annotation is Any or annotation is type(None):
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        return type(None) in get_args(annotation)
    return False


def _as_list(raw: Any) -> list:
    if isinstance(raw, XmlNode) and len(raw) == 1:
        raw = next(iter(raw.values()))
    if isinstance(raw, list):
        return raw
    if isinstance(raw, (tuple, set, frozenset)):
        return list(raw)
    return [raw]


def _field_candidates(name: str, field: Any) -> tuple[str | None, ...]:
    candidates: list[str | None] = [field.alias]
    validation_alias = field.validation_alias
    if isinstance(validation_alias, str):
        candidates.append(validation_alias)
    elif isinstance(validation_alias, AliasChoices):
        candidates.extend(c for c in validation_alias.choices if isinstance(c, str))
    candidates.append(name)
    return tuple(candidates)


def _build_model(model: type[BaseModel], raw: Any) -> BaseModel:
    if isinstance(raw, model):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(
            f"expected an object for {model.__name__}, got {type(raw).__name__}"
        )

    # keyed by field name, whatever alias the payload used
    values: dict[str, Any] = {}
    missing: list[str] = []
    for name, field in model.model_fields.items():
        found, value = _lookup(raw, _field_candidates(name, field))
        if found and value is not None:
            values[name] = _convert(field.annotation, value)
        elif field.is_required():
            missing.append(name)

    if not missing:
        return model.model_validate(values, by_alias=False, by_name=True)

    # Required fields with nothing to fill them are left as None
    logger.debug(f"{model.__name__}: no value for required fields {missing}")
    return model.model_construct(**values, **{name: None for name in missing})


def _build_dataclass(cls: type, raw: Any) -> Any:
    if isinstance(raw, cls):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(
            f"expected an object for {cls.__name__}, got {type(raw).__name__}"
        )

    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}

    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        found, value = _lookup(raw, (field.name,))
        if found and value is not None:
            kwargs[field.name] = _convert(hints.get(field.name, Any), value)
        elif (
            field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
        ):
            kwargs[field.name] = None
    return cls(**kwargs)


def _convert(annotation: Any, raw: Any) -> Any:
    if annotation is Any or annotation is object:
        return raw

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _convert(args[0], raw)

    if origin in (Union, types.UnionType):
        if raw is None:
            return None
        options = [arg for arg in args if arg is not type(None)]
        last_error: Exception | None = None
        for option in options:
            try:
                return _convert(option, raw)
            except (ValueError, TypeError) as e:
                last_error = e
        raise last_error or ValueError(f"no option of {annotation} accepted the value")

    if origin in _LIST_ORIGINS:
        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            # Fixed-length tuples are left to pydantic
            return TypeAdapter(annotation).validate_python(raw)
        item_type = args[0] if args else Any
        items = [
            _convert(item_type, item)
            for item in _as_list(raw)
            if item is not None or _allows_none(item_type)
        ]
        return origin(items)

    if origin in (dict, Mapping):
        if not isinstance(raw, Mapping):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        key_type, value_type = args if args else (Any, Any)
        keys = TypeAdapter(key_type)
        return {
            keys.validate_python(key): _convert(value_type, value)
            for key, value in raw.items()
            if value is not None or _allows_none(value_type)
        }

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return _build_model(annotation, raw)
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return _build_dataclass(annotation, raw)

    return TypeAdapter(annotation).validate_python(raw)


def _resolve_shape(shape: Any) -> Any:
    if shape is Any or isinstance(shape, type) or get_origin(shape) is not None:
        return shape
    # An instance stands in for its own type
    return type(shape)


def _is_object_shape(shape: Any) -> bool:
    origin = get_origin(shape)
    if origin is not None:
        return origin in (dict, Mapping)
    if shape is dict:
        return True
    return isinstance(shape, type) and (
        issubclass(shape, BaseModel) or dataclasses.is_dataclass(shape)
    )


def deserialize(
    response: WebResponse,
    shape: type[T] | T,
    root_element: str | None = None,
    data_format: DataFormat | None = None,
) -> T:
    """Convert the content of a response into ``shape``.

    Args:
        response: The response whose content is converted.
        shape: Target type (pydantic model, dataclass, ``list[...]``,
            ``dict``, scalar), or an instance whose type is used.
        root_element: Key (JSON) or element name (XML) to start from. When it
            is not present the whole payload is used.
        data_format: Force JSON or XML instead of detecting it from the
            response content type.

    Returns:
        A new value of the requested shape. Fields missing from the payload,
        or explicitly null, keep their defaults; undeclared payload fields
        are dropped. Empty content yields the shape built from nothing.

    Raises:
        DeserializationError: If the content does not parse, or a value
            cannot be coerced to the declared field type.
    """
    content = response.content
    fmt = data_format or detect_format(response.content_type)
    target = _resolve_shape(shape)

    payload: Any = None
    if content and content.strip():
        try:
            if fmt is DataFormat.XML:
                payload = _parse_xml(content, root_element)
            else:
                payload = _parse_json(content, root_element)
        except (json.JSONDecodeError, ET.ParseError) as e:
            raise DeserializationError(str(e), content) from e

    if payload is None and _is_object_shape(target):
        payload = {}

    try:
        return _convert(target, payload)
    except (ValidationError, ValueError, TypeError) as e:
        raise DeserializationError(str(e), content) from e
