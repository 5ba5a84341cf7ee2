"""Base command interface shared across services."""

from dataclasses import dataclass


@dataclass
class Command:
    """Base class for all commands."""
    pass
