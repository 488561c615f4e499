"""Foundation layer: errors, configuration, logging and project guards.

Nothing in here depends on the progress subsystem or the CLI.
"""
