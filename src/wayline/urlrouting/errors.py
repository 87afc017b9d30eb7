"""Router errors.

``ParsingError`` means "this grammar does not describe this request";
it is the signal the dispatch middleware uses to delegate. ``PrintingError``
means a route value cannot be rendered back into a request.
"""

from __future__ import annotations

from wayline.errors import WaylineError


class RoutingError(WaylineError):
    """Base for parse and print failures."""


class ParsingError(RoutingError):
    """No grammar alternative describes the request.

    ``str()`` renders a multi-line diagnostic; with ``alternatives`` set
    it lists the failure of every alternative that was tried.
    """

    def __init__(
        self,
        expected: str,
        found: str | None = None,
        *,
        alternatives: tuple[ParsingError, ...] = (),
    ) -> None:
        self.expected = expected
        self.found = found
        self.alternatives = alternatives
        super().__init__(str(self))

    @classmethod
    def from_alternatives(cls, errors: list[ParsingError]) -> ParsingError:
        """Combine the failures of every alternative of a ``OneOf``."""
        if len(errors) == 1:
            return errors[0]
        return cls("one of several alternatives", alternatives=tuple(errors))

    def __str__(self) -> str:
        if self.alternatives:
            parts = ["error: multiple failures occurred"]
            for error in self.alternatives:
                parts.append("\n".join("    " + line for line in str(error).splitlines()))
            return "\n\n".join(parts)
        message = f"error: expected {self.expected}"
        if self.found is not None:
            message += f"\n --> found {self.found}"
        return message


class PrintingError(RoutingError):
    """A value cannot be rendered by the grammar."""
