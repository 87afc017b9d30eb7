"""Request headers.

Decoded once from the ASGI scope. Lookups ignore case; the original
header lines (names as sent, arrival order) stay available for the
router normalizer, which flattens them itself.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only, case-insensitive view over the request's header lines.

    Indexing returns the first line's value for a name. ``get_list``
    returns every line's value; ``multi_items`` every line as sent.
    """

    __slots__ = ("_by_name", "_lines", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        lines = tuple((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)
        by_name: dict[str, list[str]] = {}
        for name, value in lines:
            by_name.setdefault(name.lower(), []).append(value)
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_lines", lines)
        object.__setattr__(self, "_by_name", by_name)

    def __getitem__(self, key: str) -> str:
        return self._by_name[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"Headers({list(self._lines)!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._by_name.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, one per header line."""
        return list(self._by_name.get(key.lower(), ()))

    def multi_items(self) -> list[tuple[str, str]]:
        """Every header line as ``(name, value)``, in arrival order."""
        return list(self._lines)

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The undecoded ASGI header pairs."""
        return self._raw
