"""ASGI request dispatch for extroute apps."""
