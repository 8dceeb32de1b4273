"""Static documentation generator turning a project tree into HTML artifacts."""

__version__ = "0.1.0"
