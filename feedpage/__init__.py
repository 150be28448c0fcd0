"""Static feed page builder for a local feed reader cache."""

__version__ = "0.1.0"
