"""Exceptions shared by the app, the path table and the URL router."""

from dataclasses import dataclass


class WaylineError(Exception):
    """Root of every exception wayline raises on purpose."""


class ConfigurationError(WaylineError):
    """Setup mistake: an invalid grammar, or registration on a running app."""


@dataclass(frozen=True, slots=True)
class HTTPError(WaylineError):
    """Raise from anywhere in the pipeline to answer with *status*.

    The request handler turns it into a response, through an
    ``@app.error`` handler when one is registered for the exception type
    or the status. *headers* are added to the default response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return f"{self.status}: {self.detail}" if self.detail else str(self.status)


class NotFound(HTTPError):  # noqa: N818
    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405, with an ``Allow`` header listing *allowed*."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow}",
            headers=(("Allow", allow),),
        )


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: the body is bigger than the configured limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
