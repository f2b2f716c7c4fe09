"""Event framing for machine-readable session output."""
