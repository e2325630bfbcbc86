"""Bulk command execution and fact gathering for Junos device fleets."""

__version__ = "0.1.0"
