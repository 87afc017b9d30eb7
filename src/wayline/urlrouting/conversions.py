"""Conversions: invertible mappings between raw request text and values.

String conversions turn a path segment, query value, or header value into
a typed value and back. Body conversions do the same for the raw body
bytes. A conversion signals a mismatch by raising ``ValueError``; the
parser that applied it turns that into a ``ParsingError``.
"""

from __future__ import annotations

import dataclasses
import json as json_module
import re
import types
import typing
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Conversion[Raw, Value](ABC):
    """Base class for conversions.

    Subclasses implement ``parse`` (raw -> value) and ``print``
    (value -> raw), and describe what they accept in ``description``.
    """

    __slots__ = ()

    description: str = "value"

    @abstractmethod
    def parse(self, raw: Raw) -> Value: ...

    @abstractmethod
    def print(self, value: Value) -> Raw: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# -- String conversions --


class Text(Conversion[str, str]):
    """Any string, unchanged."""

    __slots__ = ()
    description = "text"

    def parse(self, raw: str) -> str:
        return raw

    def print(self, value: str) -> str:
        if not isinstance(value, str):
            msg = f"expected str, got {type(value).__name__}"
            raise TypeError(msg)
        return value


class Digits(Conversion[str, int]):
    """One or more ASCII decimal digits as a non-negative ``int``."""

    __slots__ = ()
    description = "digits"

    def parse(self, raw: str) -> int:
        if not (raw.isascii() and raw.isdigit()):
            msg = f"{raw!r} is not a run of digits"
            raise ValueError(msg)
        return int(raw)

    def print(self, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = f"expected a non-negative int, got {value!r}"
            raise ValueError(msg)
        return str(value)


class Int(Conversion[str, int]):
    """A signed decimal integer."""

    __slots__ = ()
    description = "integer"

    def parse(self, raw: str) -> int:
        if not _SIGNED_INT.fullmatch(raw):
            msg = f"{raw!r} is not an integer"
            raise ValueError(msg)
        return int(raw)

    def print(self, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"expected int, got {type(value).__name__}"
            raise TypeError(msg)
        return str(value)


class Float(Conversion[str, float]):
    """A finite decimal number."""

    __slots__ = ()
    description = "number"

    def parse(self, raw: str) -> float:
        if not _FLOAT.fullmatch(raw):
            msg = f"{raw!r} is not a number"
            raise ValueError(msg)
        return float(raw)

    def print(self, value: float) -> str:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            msg = f"expected float, got {type(value).__name__}"
            raise TypeError(msg)
        return repr(float(value))


class UUIDString(Conversion[str, uuid.UUID]):
    """A UUID in any form ``uuid.UUID`` accepts; printed in canonical form."""

    __slots__ = ()
    description = "UUID"

    def parse(self, raw: str) -> uuid.UUID:
        return uuid.UUID(raw)

    def print(self, value: uuid.UUID) -> str:
        if not isinstance(value, uuid.UUID):
            msg = f"expected UUID, got {type(value).__name__}"
            raise TypeError(msg)
        return str(value)


class Choice[E: Enum](Conversion[str, E]):
    """A member of a string-valued ``Enum``, matched by value."""

    __slots__ = ("enum",)

    def __init__(self, enum: type[E]) -> None:
        self.enum = enum

    @property
    def description(self) -> str:  # type: ignore[override]
        values = ", ".join(repr(str(member.value)) for member in self.enum)
        return f"one of {values}"

    def parse(self, raw: str) -> E:
        for member in self.enum:
            if str(member.value) == raw:
                return member
        msg = f"{raw!r} is not a {self.enum.__name__}"
        raise ValueError(msg)

    def print(self, value: E) -> str:
        if not isinstance(value, self.enum):
            msg = f"expected {self.enum.__name__}, got {type(value).__name__}"
            raise TypeError(msg)
        return str(value.value)

    def __repr__(self) -> str:
        return f"Choice({self.enum.__name__})"


# -- Body conversions --


class Data(Conversion[bytes, bytes]):
    """The raw body bytes."""

    __slots__ = ()
    description = "body bytes"

    def parse(self, raw: bytes) -> bytes:
        return raw

    def print(self, value: bytes) -> bytes:
        if not isinstance(value, (bytes, bytearray)):
            msg = f"expected bytes, got {type(value).__name__}"
            raise TypeError(msg)
        return bytes(value)


class UTF8(Conversion[bytes, str]):
    """The body decoded as UTF-8 text."""

    __slots__ = ()
    description = "UTF-8 text"

    def parse(self, raw: bytes) -> str:
        return raw.decode("utf-8")

    def print(self, value: str) -> bytes:
        return value.encode("utf-8")


class JSON[T](Conversion[bytes, T]):
    """A JSON body, optionally decoded into a dataclass.

    ``JSON(Comment)`` decodes an object into ``Comment``, converting nested
    dataclass fields and ``list[...]`` of dataclasses recursively. Missing
    required fields and type mismatches on ``str``/``int``/``float``/``bool``
    fields fail the parse. ``JSON()`` returns the decoded value as-is.
    """

    __slots__ = ("model",)

    def __init__(self, model: type[T] | None = None) -> None:
        self.model = model

    @property
    def description(self) -> str:  # type: ignore[override]
        if self.model is None:
            return "JSON body"
        return f"JSON {self.model.__name__}"

    def parse(self, raw: bytes) -> T:
        decoded = json_module.loads(raw)
        if self.model is None:
            return decoded
        return _from_json(decoded, self.model)

    def print(self, value: T) -> bytes:
        if self.model is not None and dataclasses.is_dataclass(self.model):
            if not isinstance(value, self.model):
                msg = f"expected {self.model.__name__}, got {type(value).__name__}"
                raise TypeError(msg)
        return json_module.dumps(_to_json(value)).encode("utf-8")

    def __repr__(self) -> str:
        return f"JSON({self.model.__name__})" if self.model is not None else "JSON()"


_SCALARS: dict[type, tuple[type, ...]] = {
    str: (str,),
    int: (int,),
    float: (int, float),
    bool: (bool,),
}


def _from_json(value: Any, target: Any) -> Any:
    """Convert a decoded JSON value to *target*, raising ValueError on mismatch."""
    if isinstance(target, type) and dataclasses.is_dataclass(target):
        if not isinstance(value, dict):
            msg = f"expected an object for {target.__name__}, got {type(value).__name__}"
            raise ValueError(msg)
        hints = typing.get_type_hints(target)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(target):
            if f.init and f.name in value:
                kwargs[f.name] = _from_json(value[f.name], hints.get(f.name, Any))
        try:
            return target(**kwargs)
        except TypeError as exc:
            raise ValueError(f"cannot build {target.__name__}: {exc}") from exc

    origin = typing.get_origin(target)
    if origin is list:
        (item_type,) = typing.get_args(target) or (Any,)
        if not isinstance(value, list):
            msg = f"expected a list, got {type(value).__name__}"
            raise ValueError(msg)
        return [_from_json(item, item_type) for item in value]
    if origin in (typing.Union, types.UnionType):
        args = typing.get_args(target)
        if value is None and type(None) in args:
            return None
        non_null = [arg for arg in args if arg is not type(None)]
        if len(non_null) == 1:
            return _from_json(value, non_null[0])
        return value

    accepted = _SCALARS.get(target)
    if accepted is not None:
        if isinstance(value, bool) and target is not bool:
            msg = f"expected {target.__name__}, got bool"
            raise ValueError(msg)
        if not isinstance(value, accepted):
            msg = f"expected {target.__name__}, got {type(value).__name__}"
            raise ValueError(msg)
        return float(value) if target is float else value
    return value


def _to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value
