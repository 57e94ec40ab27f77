"""Settings and composed configuration management."""
