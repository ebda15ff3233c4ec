"""Live viewer for a single serial-attached environmental sensor."""

__version__ = "0.1.0"
