"""Procedurally partitioned tile boards with connectivity-safe group moves."""

__version__ = "0.1.0"
