"""Domain models, configuration and errors."""
