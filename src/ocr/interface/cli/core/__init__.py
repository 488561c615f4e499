"""Core CLI infrastructure: entry point, theme, async runner, error handling."""
