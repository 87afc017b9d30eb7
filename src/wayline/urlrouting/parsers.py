"""Leaf parser-printers: one per piece of a request.

Each consumes exactly what it matches so that sibling pieces and the
final end-of-path check see only what is left.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, ClassVar, Final

from wayline.errors import ConfigurationError
from wayline.urlrouting.conversions import Conversion, Data, Text
from wayline.urlrouting.core import ParserPrinter, RequestInput
from wayline.urlrouting.errors import ParsingError, PrintingError


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()
"""Sentinel: a ``Field`` without a default is required."""


class Method(ParserPrinter):
    """Match the HTTP method, case-insensitively.

    ``Method.POST`` and friends are ready-made instances.
    """

    __slots__ = ("name",)

    GET: ClassVar[Method]
    POST: ClassVar[Method]
    PUT: ClassVar[Method]
    PATCH: ClassVar[Method]
    DELETE: ClassVar[Method]
    HEAD: ClassVar[Method]
    OPTIONS: ClassVar[Method]

    def __init__(self, name: str) -> None:
        self.name = name.upper()

    @property
    def arity(self) -> int:
        return 0

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        if state.method is None or state.method.upper() != self.name:
            raise ParsingError(f"method {self.name}", found=state.method)
        state.method = None
        return ()

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        state.method = self.name

    def __repr__(self) -> str:
        return f"Method({self.name!r})"


for _name in ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"):
    setattr(Method, _name, Method(_name))
del _name


class Path(ParserPrinter):
    """Match consecutive path segments.

    A ``str`` component matches that exact segment; a ``Conversion``
    component converts one segment into an output::

        Path("episodes", Digits(), "comments")
    """

    __slots__ = ("components",)

    def __init__(self, *components: str | Conversion[str, Any]) -> None:
        if not components:
            msg = "Path needs at least one component"
            raise ConfigurationError(msg)
        for component in components:
            if isinstance(component, str):
                if not component or "/" in component:
                    msg = f"Path literal must be one non-empty segment, got {component!r}"
                    raise ConfigurationError(msg)
            elif not isinstance(component, Conversion):
                msg = f"Path component must be a str or Conversion, got {component!r}"
                raise ConfigurationError(msg)
        self.components = components

    @property
    def arity(self) -> int:
        return sum(1 for c in self.components if not isinstance(c, str))

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        outputs: list[Any] = []
        for component in self.components:
            if not state.path:
                raise ParsingError(_describe(component), found="end of path")
            segment = state.path[0]
            if isinstance(component, str):
                if segment != component:
                    raise ParsingError(_describe(component), found=repr(segment))
            else:
                try:
                    outputs.append(component.parse(segment))
                except (TypeError, ValueError) as exc:
                    raise ParsingError(component.description, found=repr(segment)) from exc
            del state.path[0]
        return tuple(outputs)

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        values = iter(outputs)
        for component in self.components:
            if isinstance(component, str):
                state.path.append(component)
                continue
            value = next(values)
            try:
                state.path.append(component.print(value))
            except (TypeError, ValueError) as exc:
                msg = f"cannot print {value!r} as {component.description}: {exc}"
                raise PrintingError(msg) from exc

    def __repr__(self) -> str:
        return f"Path({', '.join(repr(c) for c in self.components)})"


def _describe(component: str | Conversion[str, Any]) -> str:
    if isinstance(component, str):
        return f"path segment {component!r}"
    return component.description


class PathEnd(ParserPrinter):
    """Match only when no path segments remain."""

    __slots__ = ()

    @property
    def arity(self) -> int:
        return 0

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        if state.path:
            raise ParsingError("end of path", found=repr("/" + "/".join(state.path)))
        return ()

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        return None

    def __repr__(self) -> str:
        return "PathEnd()"


class Field:
    """A named query parameter or header, converted by *conversion*.

    Without a *default* the field is required. With one, an absent field
    parses as the default and a value equal to the default is omitted
    when printing.
    """

    __slots__ = ("conversion", "default", "name")

    def __init__(
        self,
        name: str,
        conversion: Conversion[str, Any] | None = None,
        *,
        default: Any = MISSING,
    ) -> None:
        self.name = name
        self.conversion = conversion if conversion is not None else Text()
        self.default = default

    @property
    def required(self) -> bool:
        return self.default is MISSING

    def __repr__(self) -> str:
        return f"Field({self.name!r}, {self.conversion!r})"


class _Fields(ParserPrinter):
    """Shared machinery for ``Query`` and ``Headers``."""

    __slots__ = ("fields",)

    kind: ClassVar[str] = "field"

    def __init__(self, *fields: Field) -> None:
        if not fields:
            msg = f"{type(self).__name__} needs at least one Field"
            raise ConfigurationError(msg)
        self.fields = fields

    @property
    def arity(self) -> int:
        return len(self.fields)

    @abstractmethod
    def _table(self, state: RequestInput) -> dict[str, list[Any]]: ...

    def _key(self, table: dict[str, list[Any]], name: str) -> str | None:
        return name if name in table else None

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        table = self._table(state)
        outputs: list[Any] = []
        for f in self.fields:
            key = self._key(table, f.name)
            values = table.get(key) if key is not None else None
            if not values or values[0] is None:
                if f.required:
                    found = "valueless" if values else None
                    raise ParsingError(f"{self.kind} {f.name!r}", found=found)
                outputs.append(f.default)
                continue
            raw = values[0]
            try:
                outputs.append(f.conversion.parse(raw))
            except (TypeError, ValueError) as exc:
                raise ParsingError(
                    f"{self.kind} {f.name!r} as {f.conversion.description}", found=repr(raw)
                ) from exc
            del values[0]
            if not values:
                del table[key]
        return tuple(outputs)

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        table = self._table(state)
        for f, value in zip(self.fields, outputs, strict=True):
            if not f.required and value == f.default:
                continue
            try:
                raw = f.conversion.print(value)
            except (TypeError, ValueError) as exc:
                msg = f"cannot print {self.kind} {f.name!r} from {value!r}: {exc}"
                raise PrintingError(msg) from exc
            table.setdefault(f.name, []).append(raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(f) for f in self.fields)})"


class Query(_Fields):
    """Match named query parameters."""

    __slots__ = ()
    kind = "query parameter"

    def _table(self, state: RequestInput) -> dict[str, list[Any]]:
        return state.query


class Headers(_Fields):
    """Match named headers; names compare case-insensitively."""

    __slots__ = ()
    kind = "header"

    def _table(self, state: RequestInput) -> dict[str, list[Any]]:
        return state.headers

    def _key(self, table: dict[str, list[Any]], name: str) -> str | None:
        lowered = name.lower()
        for key in table:
            if key.lower() == lowered:
                return key
        return None


class Body(ParserPrinter):
    """Match the request body, converted by *conversion*."""

    __slots__ = ("conversion",)

    def __init__(self, conversion: Conversion[bytes, Any] | None = None) -> None:
        self.conversion = conversion if conversion is not None else Data()

    @property
    def arity(self) -> int:
        return 1

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        if state.body is None:
            raise ParsingError(self.conversion.description, found="no body")
        try:
            value = self.conversion.parse(state.body)
        except (TypeError, ValueError) as exc:
            raise ParsingError(self.conversion.description, found=str(exc)) from exc
        state.body = None
        return (value,)

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        (value,) = outputs
        try:
            state.body = self.conversion.print(value)
        except (TypeError, ValueError) as exc:
            msg = f"cannot print body as {self.conversion.description}: {exc}"
            raise PrintingError(msg) from exc

    def __repr__(self) -> str:
        return f"Body({self.conversion!r})"


class Scheme(ParserPrinter):
    """Match the URL scheme, case-insensitively."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name.lower()

    @property
    def arity(self) -> int:
        return 0

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        if state.scheme is None or state.scheme.lower() != self.name:
            raise ParsingError(f"scheme {self.name!r}", found=state.scheme)
        state.scheme = None
        return ()

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        state.scheme = self.name

    def __repr__(self) -> str:
        return f"Scheme({self.name!r})"


class Host(ParserPrinter):
    """Match the host name, case-insensitively."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name.lower()

    @property
    def arity(self) -> int:
        return 0

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        if state.host is None or state.host.lower() != self.name:
            raise ParsingError(f"host {self.name!r}", found=state.host)
        state.host = None
        return ()

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        state.host = self.name

    def __repr__(self) -> str:
        return f"Host({self.name!r})"
