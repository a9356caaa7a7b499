"""Configuration, dry-run aware command execution and step reporting for running updaters."""

__version__ = "15.0.0"