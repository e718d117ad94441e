"""Testing utilities for extroute applications.

Usage::

    from extroute.testing import TestClient

    async with TestClient(app) as client:
        response = await client.get("/ext/health")
"""

from extroute.testing.client import TestClient

__all__ = ["TestClient"]
