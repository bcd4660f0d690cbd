"""docsniff - doc comment structure checks for PHP token streams."""

__version__ = "0.1.0"
