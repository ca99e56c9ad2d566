"""Run command templates in named terminal sessions."""

__version__ = "0.3.0"
