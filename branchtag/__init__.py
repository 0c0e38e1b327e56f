"""Branch-driven semantic version tagging for git repositories."""

__version__ = "0.4.0"
