"""Steam profile report for the players of a CS:GO server `status` dump."""

__version__ = "0.1.0"
