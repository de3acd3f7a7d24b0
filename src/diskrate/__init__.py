"""diskrate - block device I/O rate collector."""

__version__ = "0.1.0"
