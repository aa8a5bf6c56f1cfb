"""Hero and guild action resolution core."""

__version__ = "0.1.0"
