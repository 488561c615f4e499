"""CLI command implementations (one *_cmd.py module per command)."""
