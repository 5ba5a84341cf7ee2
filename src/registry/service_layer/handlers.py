import logging

from insights.service_layer import summarizer
from registry.domain import model
from registry.domain.commands import GenerateInsight, RegisterCase
from registry.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def register_case(
    command: RegisterCase,
    uow: AbstractUnitOfWork
) -> model.CaseRecord:
    """
    Register a captured case.

    Flow:
    1. Validate the draft (severity is derived here)
    2. Append the record via repository
    3. Commit - the record becomes visible and durable together

    Args:
        command: RegisterCase command with the operator's draft
        uow: Unit of work holding the record store

    Returns:
        The created CaseRecord

    Raises:
        CaseValidationError: If the draft is rejected; nothing is stored
        RecordStoreError: If the collection could not be persisted
    """
    record = model.validate(command.draft)
    logger.info(f"Validated draft as record {record.id} ({record.district}, {record.severity})")

    with uow:
        uow.records.add(record)
        uow.commit()
        logger.info(f"Committed record {record.id}")

    return record


def generate_insight(
    command: GenerateInsight,
    uow: AbstractUnitOfWork
) -> str:
    """
    Summarize all stored records with the text-generation service.

    Raises:
        ServiceFailure: If the service call fails; carries the generic message
    """
    with uow:
        records = uow.records.list()
        client = uow.text_generator

    return summarizer.summarize(records, client)
