"""goupgrade - keep the Go toolchain on a Linux host up to date."""

__version__ = "0.1.0"
