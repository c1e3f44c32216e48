"""Recipe normalization and ingredient scaling."""

__version__ = "0.1.0"
