"""Parser-printer core: the router contract and its structural combinators.

A ``ParserPrinter`` runs in two directions over the same grammar:

* **parse** consumes pieces of a ``RequestInput`` (a mutable working copy
  of ``URLRequestData``) and yields a tuple of outputs.
* **print** takes the same tuple of outputs and writes the pieces back
  into an initially empty ``RequestInput``.

``arity`` is the length of the output tuple. Literal pieces (a fixed path
segment, a method) have arity 0; a ``Route`` collects the outputs of its
pieces into one route value, so it has arity 1.

Failed alternatives never leak consumption: ``OneOf`` hands each attempt
a copy of the input and commits only the one that succeeds.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from wayline.errors import ConfigurationError
from wayline.urlrouting.errors import ParsingError, PrintingError
from wayline.urlrouting.request_data import URLRequestData, split_url


@dataclass(slots=True)
class RequestInput:
    """Mutable working state for one parse or print pass.

    Parsers remove what they consume; printers add what they render.
    """

    method: str | None = None
    scheme: str | None = None
    user: str | None = None
    password: str | None = None
    host: str | None = None
    port: int | None = None
    path: list[str] = field(default_factory=list)
    query: dict[str, list[str | None]] = field(default_factory=dict)
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: bytes | None = None

    @classmethod
    def from_data(cls, data: URLRequestData) -> RequestInput:
        return cls(
            method=data.method,
            scheme=data.scheme,
            user=data.user,
            password=data.password,
            host=data.host,
            port=data.port,
            path=list(data.path),
            query={name: list(values) for name, values in data.query.items()},
            headers={name: list(values) for name, values in data.headers.items()},
            body=data.body,
        )

    def to_data(self) -> URLRequestData:
        return URLRequestData(
            method=self.method,
            scheme=self.scheme,
            user=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            path=self.path,
            query=self.query,
            headers=self.headers,
            body=self.body,
        )

    def copy(self) -> RequestInput:
        return RequestInput(
            method=self.method,
            scheme=self.scheme,
            user=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            path=list(self.path),
            query={name: list(values) for name, values in self.query.items()},
            headers={name: list(values) for name, values in self.headers.items()},
            body=self.body,
        )

    def commit(self, other: RequestInput) -> None:
        """Adopt the state of *other* (a successful trial copy)."""
        for f in dataclasses.fields(self):
            setattr(self, f.name, getattr(other, f.name))


class ParserPrinter(ABC):
    """A bidirectional grammar over ``URLRequestData``.

    Subclasses implement ``parse_input`` / ``print_output`` and report
    their ``arity``. Users call ``parse``, ``print``, ``path_for`` and
    ``url_for``.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def arity(self) -> int:
        """Number of outputs this piece produces."""

    @abstractmethod
    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        """Consume from *state*; raise ``ParsingError`` on mismatch."""

    @abstractmethod
    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        """Render *outputs* into *state*; raise ``PrintingError`` if impossible."""

    # -- Public API --

    def parse(self, data: URLRequestData | str) -> Any:
        """Parse a whole request description into this grammar's output.

        A string is read as a URL. Every path segment must be consumed;
        unconsumed query parameters and headers are ignored.

        Raises:
            ParsingError: The grammar does not describe *data*.
        """
        if isinstance(data, str):
            try:
                data = URLRequestData.from_url(data)
            except ValueError as exc:
                raise ParsingError("a valid URL", found=repr(data)) from exc
        state = RequestInput.from_data(data)
        outputs = self.parse_input(state)
        if state.path:
            raise ParsingError("end of path", found=_describe_path(state.path))
        return _unwrap(outputs)

    def print(self, value: Any = None) -> URLRequestData:
        """Render *value* back into the request description that parses to it.

        Raises:
            PrintingError: *value* is not something this grammar produces.
        """
        state = RequestInput()
        self.print_output(_wrap(value, self.arity), state)
        return state.to_data()

    def path_for(self, value: Any = None) -> str:
        """Path and query string for *value*, e.g. ``/episodes/42?count=5``."""
        return self.print(value).target

    def url_for(self, value: Any = None) -> str:
        """Full URL for *value*; absolute when a ``base_url`` supplies a host."""
        return self.print(value).url

    def base_url(self, url: str) -> BaseURL:
        """Return a router that prints absolute URLs rooted at *url*."""
        return BaseURL(self, url)


def _wrap(value: Any, arity: int) -> tuple[Any, ...]:
    if arity == 0:
        return ()
    if arity == 1:
        return (value,)
    if not isinstance(value, tuple) or len(value) != arity:
        msg = f"expected a tuple of {arity} values, got {value!r}"
        raise PrintingError(msg)
    return value


def _unwrap(outputs: tuple[Any, ...]) -> Any:
    if not outputs:
        return None
    if len(outputs) == 1:
        return outputs[0]
    return outputs


def _describe_path(path: list[str]) -> str:
    return repr("/" + "/".join(path))


class OneOf(ParserPrinter):
    """Ordered alternation: the first alternative that parses wins.

    Printing tries the alternatives in the same order and uses the first
    one that can render the value.
    """

    __slots__ = ("alternatives",)

    def __init__(self, *alternatives: ParserPrinter) -> None:
        if not alternatives:
            msg = "OneOf needs at least one alternative"
            raise ConfigurationError(msg)
        arities = {alternative.arity for alternative in alternatives}
        if len(arities) != 1:
            msg = f"OneOf alternatives must produce the same number of outputs, got {sorted(arities)}"
            raise ConfigurationError(msg)
        self.alternatives: tuple[ParserPrinter, ...] = alternatives

    @property
    def arity(self) -> int:
        return self.alternatives[0].arity

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        errors: list[ParsingError] = []
        for alternative in self.alternatives:
            trial = state.copy()
            try:
                outputs = alternative.parse_input(trial)
            except ParsingError as exc:
                errors.append(exc)
                continue
            state.commit(trial)
            return outputs
        raise ParsingError.from_alternatives(errors)

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        failures: list[str] = []
        for alternative in self.alternatives:
            trial = state.copy()
            try:
                alternative.print_output(outputs, trial)
            except PrintingError as exc:
                failures.append(str(exc))
                continue
            state.commit(trial)
            return
        msg = "no alternative can print the value:\n" + "\n".join(
            f"  - {failure}" for failure in failures
        )
        raise PrintingError(msg)

    def __repr__(self) -> str:
        return f"OneOf({', '.join(repr(a) for a in self.alternatives)})"


class Route(ParserPrinter):
    """One variant of a route sum type and the grammar that describes it.

    *variant* is a dataclass; the outputs of *pieces*, in order, become
    its ``__init__`` fields in declaration order::

        @dataclass(frozen=True)
        class Episode:
            id: int
            route: EpisodeRoute

        Route(Episode, Path(Digits()), episode_router)

    A route only matches once the whole path is consumed. If no piece
    consumed the method, the request must be a ``GET``.
    """

    __slots__ = ("_fields", "pieces", "variant")

    def __init__(self, variant: type, *pieces: ParserPrinter) -> None:
        if not (isinstance(variant, type) and dataclasses.is_dataclass(variant)):
            msg = f"Route variant must be a dataclass type, got {variant!r}"
            raise ConfigurationError(msg)
        names = tuple(f.name for f in dataclasses.fields(variant) if f.init)
        produced = sum(piece.arity for piece in pieces)
        if produced != len(names):
            msg = (
                f"Route({variant.__name__}) pieces produce {produced} value(s) "
                f"but {variant.__name__} has {len(names)} field(s): {', '.join(names) or '-'}"
            )
            raise ConfigurationError(msg)
        self.variant = variant
        self.pieces: tuple[ParserPrinter, ...] = pieces
        self._fields = names

    @property
    def arity(self) -> int:
        return 1

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        values: list[Any] = []
        for piece in self.pieces:
            values.extend(piece.parse_input(state))
        if state.method is not None:
            if state.method.upper() != "GET":
                raise ParsingError("method GET", found=state.method)
            state.method = None
        if state.path:
            raise ParsingError("end of path", found=_describe_path(state.path))
        try:
            return (self.variant(*values),)
        except (TypeError, ValueError) as exc:
            raise ParsingError(f"a valid {self.variant.__name__}", found=str(exc)) from exc

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        (value,) = outputs
        if type(value) is not self.variant:
            msg = f"{self.variant.__name__} cannot print {type(value).__name__}"
            raise PrintingError(msg)
        values = tuple(getattr(value, name) for name in self._fields)
        offset = 0
        for piece in self.pieces:
            piece.print_output(values[offset : offset + piece.arity], state)
            offset += piece.arity

    def __repr__(self) -> str:
        return f"Route({self.variant.__name__})"


class BaseURL(ParserPrinter):
    """Print-side decoration: roots printed requests at a base URL.

    Fills in scheme, host and port when the grammar leaves them unset and
    prefixes the base path. Parsing is delegated untouched.
    """

    __slots__ = ("_base", "router")

    def __init__(self, router: ParserPrinter, url: str) -> None:
        try:
            base = split_url(url)
        except ValueError as exc:
            msg = f"Invalid base URL {url!r}: {exc}"
            raise ConfigurationError(msg) from exc
        self.router = router
        self._base = base

    @property
    def arity(self) -> int:
        return self.router.arity

    def parse_input(self, state: RequestInput) -> tuple[Any, ...]:
        return self.router.parse_input(state)

    def print_output(self, outputs: tuple[Any, ...], state: RequestInput) -> None:
        self.router.print_output(outputs, state)
        base = self._base
        state.scheme = state.scheme or base.scheme
        state.host = state.host or base.host
        state.port = state.port if state.port is not None else base.port
        state.path[:0] = base.path
        for name, values in base.query.items():
            state.query.setdefault(name, []).extend(values)

    def __repr__(self) -> str:
        return f"{self.router!r}.base_url(...)"
