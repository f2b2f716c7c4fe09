"""Request workflow services."""
