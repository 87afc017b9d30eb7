"""Application settings.

One frozen ``AppConfig`` is handed to ``App``; nothing reads settings
from anywhere else.
"""

from dataclasses import dataclass

ENVIRONMENTS = ("development", "testing", "production")

DEFAULT_MAX_CONTENT_LENGTH = 16 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings for an ``App``. Every field has a default::

        AppConfig(environment="development", port=3000)

    ``environment`` decides how mounted routers fall back: only
    ``"development"`` answers with routing diagnostics. ``debug`` is
    separate; it enables reload and traceback bodies for 500s.
    """

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    reload_dirs: tuple[str, ...] = ()
    environment: str = "production"
    # Bytes a mounted router will buffer before answering 413
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    log_level: str = "info"

    def __post_init__(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"Unknown environment {self.environment!r}. "
                f"Expected one of: {', '.join(ENVIRONMENTS)}"
            )
        if self.max_content_length < 0:
            raise ValueError("max_content_length must be >= 0")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"
