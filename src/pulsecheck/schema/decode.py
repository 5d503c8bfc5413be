# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Strict decoding of plain YAML data into frozen dataclasses, and the reverse.

Decoding order at every level: unknown keys first, then nested fields, then
the semantic validator registered for the type. A null value leaves the field
at its zero value.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import fields, is_dataclass
from functools import lru_cache
from typing import Any, TypeVar, get_args, get_origin, get_type_hints

from ..errors import UnknownFieldsError, ValidationError
from .fields import REDACTED, Secret

T = TypeVar("T")
Validator = Callable[[Any], Any]


@lru_cache(maxsize=None)
def _type_hints(cls: type) -> dict[str, Any]:
    return get_type_hints(cls)


def context_name(cls: type) -> str:
    return getattr(cls, "context_name", cls.__name__.lower())


def _type_label(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, list):
        return "sequence"
    return type(value).__name__


class StrictDecoder:
    """Decode nested mappings into dataclasses, rejecting undeclared keys."""

    def __init__(self, validators: Mapping[type, Validator] | None = None):
        self.validators: dict[type, Validator] = dict(validators or {})

    def decode(self, cls: type[T], raw: Any) -> T:
        context = context_name(cls)
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ValidationError(f"cannot decode {_type_label(raw)} into {context}")

        declared = {spec.name: spec for spec in fields(cls) if spec.init}
        unknown = [key for key in raw if key not in declared]
        if unknown:
            raise UnknownFieldsError(context, unknown)

        hints = _type_hints(cls)
        kwargs: dict[str, Any] = {}
        for key, value in raw.items():
            if value is None:
                continue
            custom = declared[key].metadata.get("decode")
            if custom is not None:
                kwargs[key] = custom(value)
            else:
                kwargs[key] = self._decode_value(hints[key], value, key, context)

        instance = cls(**kwargs)
        validator = self.validators.get(cls)
        if validator is not None:
            instance = validator(instance)
        return instance

    def _decode_value(self, hint: Any, value: Any, key: str, context: str) -> Any:
        origin = get_origin(hint)
        if is_dataclass(hint):
            return self.decode(hint, value)
        if origin is list:
            if not isinstance(value, list):
                raise self._mismatch(value, "sequence", key, context)
            (item_hint,) = get_args(hint)
            return [self._decode_value(item_hint, item, key, context) for item in value]
        if origin is dict:
            if not isinstance(value, Mapping):
                raise self._mismatch(value, "mapping", key, context)
            _, item_hint = get_args(hint)
            return {str(name): self._decode_value(item_hint, item, key, context) for name, item in value.items()}
        if hint is bool:
            if not isinstance(value, bool):
                raise self._mismatch(value, "bool", key, context)
            return value
        if hint is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise self._mismatch(value, "int", key, context)
            return value
        if hint is float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise self._mismatch(value, "float", key, context)
            return float(value)
        if hint is str or hint is Secret:
            if isinstance(value, (Mapping, list)):
                raise self._mismatch(value, "string", key, context)
            if isinstance(value, bool):
                value = "true" if value else "false"
            return hint(value)
        raise ValidationError(f"unsupported field type for {key} in {context}")  # pragma: no cover

    @staticmethod
    def _mismatch(value: Any, expected: str, key: str, context: str) -> ValidationError:
        return ValidationError(f"cannot decode {_type_label(value)} {value!r} into {expected} field {key!r} of {context}")


def encode(value: Any) -> Any:
    """
    Turn a decoded dataclass tree back into plain data.

    Zero values are omitted and secrets are replaced by ``<secret>``.
    """
    if isinstance(value, Secret):
        return REDACTED if value else ""
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for spec in fields(value):
            item = getattr(value, spec.name)
            if _is_default(item):
                continue
            custom = spec.metadata.get("encode")
            out[spec.name] = custom(item) if custom is not None else encode(item)
        return out
    if isinstance(value, Mapping):
        return {str(key): encode(item) for key, item in value.items()}
    if isinstance(value, list):
        return [encode(item) for item in value]
    return value


def _is_default(item: Any) -> bool:
    if item is None:
        return True
    if is_dataclass(item):
        return item == type(item)()
    if isinstance(item, (list, dict, str)) and not item:
        return True
    if isinstance(item, bool):
        return item is False
    if isinstance(item, (int, float)):
        return item == 0
    return False


__all__ = ["StrictDecoder", "context_name", "encode"]
