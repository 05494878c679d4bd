"""repoctl - manage local pacman repositories."""

__version__ = "0.1.0"
