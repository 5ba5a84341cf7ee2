"""Message bus for the case registry following Cosmic Python pattern."""

from __future__ import annotations
import logging
from typing import Callable, Dict, Type, Union, TYPE_CHECKING

from shared.domain.commands import Command
from registry.domain.commands import GenerateInsight, RegisterCase
from registry.service_layer import handlers

if TYPE_CHECKING:
    from registry.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

Message = Union[RegisterCase, GenerateInsight]


def handle(
    message: Message,
    uow: AbstractUnitOfWork,
):
    """Handle a command with its registered handler and return the results."""
    if not isinstance(message, Command):
        raise TypeError(f"{message} was not a Command")
    return [handle_command(message, uow)]


def handle_command(
    command: Command,
    uow: AbstractUnitOfWork,
):
    """Handle command by calling the registered command handler."""
    logger.debug(f"handling command {type(command).__name__}")
    try:
        handler = COMMAND_HANDLERS[type(command)]
        return handler(command, uow=uow)
    except Exception as e:
        logger.warning(f"Command {type(command).__name__} failed: {type(e).__name__}: {e}")
        raise


# Command handlers - single handler per command type
COMMAND_HANDLERS = {
    RegisterCase: handlers.register_case,
    GenerateInsight: handlers.generate_insight,
}  # type: Dict[Type[Command], Callable]
