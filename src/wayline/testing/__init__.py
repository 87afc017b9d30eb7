"""Test utilities for wayline applications.

    from wayline.testing import TestClient
"""

from wayline.testing.client import TestClient

__all__ = [
    "TestClient",
]
