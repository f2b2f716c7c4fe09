"""HTTP transport for generation requests."""
