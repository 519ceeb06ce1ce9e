"""fitps - ps output fitted to the terminal, with query highlighting."""

__version__ = "0.1.0"
