"""Keep local git working copies in sync with their remotes."""

__version__ = "0.1.0"
