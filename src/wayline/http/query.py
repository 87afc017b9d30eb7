"""Query string, form-decoded.

This is the convenience view for path-table handlers: ``+`` means a
space and ``?flag`` reads as ``flag=""``. The router normalizer decodes
``raw`` itself with URL-component rules instead.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Read-only mapping of query parameters.

    Indexing gives the first value for a name, ``get_list`` all of them.
    """

    __slots__ = ("_by_name", "_pairs", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        pairs = tuple(parse_qsl(query_string.decode("latin-1"), keep_blank_values=True))
        by_name: dict[str, list[str]] = {}
        for name, value in pairs:
            by_name.setdefault(name, []).append(value)
        object.__setattr__(self, "_raw", query_string)
        object.__setattr__(self, "_pairs", pairs)
        object.__setattr__(self, "_by_name", by_name)

    def __getitem__(self, key: str) -> str:
        return self._by_name[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw.decode('latin-1')!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._by_name.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        return list(self._by_name.get(key, ()))

    def multi_items(self) -> list[tuple[str, str]]:
        """Every ``(name, value)`` pair in query-string order."""
        return list(self._pairs)

    @property
    def raw(self) -> bytes:
        return self._raw
