"""Process-wide configuration and logging."""
