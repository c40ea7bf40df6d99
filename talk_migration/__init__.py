"""Talk migration pipeline: third-party presentation pages → local talk records."""

__version__ = "0.3.0"
