"""Create a commit on GitHub through the Git data API."""

__version__ = "0.1.0"
