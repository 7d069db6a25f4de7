"""Submit merged pull request metadata to an analytics endpoint."""

__version__ = "0.1.0"
