"""Trust-decaying data retention simulator."""

__version__ = "0.1.0"
