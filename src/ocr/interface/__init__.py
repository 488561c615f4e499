"""User-facing interfaces for Open Code Review."""
