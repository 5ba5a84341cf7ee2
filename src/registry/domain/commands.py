"""Commands for the case registry."""

from dataclasses import dataclass

from registry.domain.model import CaseDraft
from shared.domain.commands import Command


@dataclass
class RegisterCase(Command):
    """Command to validate a draft and append it to the registry."""
    draft: CaseDraft


@dataclass
class GenerateInsight(Command):
    """Command to summarize the registry with the text-generation service."""
    pass
