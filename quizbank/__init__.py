"""Quiz web application: question import, storage and rendering."""

__version__ = "0.1.0"
