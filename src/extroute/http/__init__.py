"""HTTP request and response types for route handlers."""
