"""Shared type aliases used across extroute modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function or bound method with variable signature
Handler: TypeAlias = Callable[..., Any]

# Lifecycle hook: zero-argument sync or async callable
Hook: TypeAlias = Callable[[], Any]
