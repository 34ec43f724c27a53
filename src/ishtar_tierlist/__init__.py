"""League stats API and drag-and-drop role tier list."""

__version__ = "0.1.0"
