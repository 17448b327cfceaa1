from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from prodialer_backend.models import ContactRecord
from prodialer_backend.schemas.contact import CallEvent, Contact

logger = logging.getLogger("prodialer.services.contacts")


def _coerce_call_history(contact_id: str, raw_events: Optional[Iterable[Any]]) -> List[CallEvent]:
    """
    Validate stored call events one by one, dropping the ones that cannot
    be read (typically a missing or unparseable `time`).
    """
    events: List[CallEvent] = []
    for position, raw in enumerate(raw_events or []):
        try:
            events.append(CallEvent.model_validate(raw))
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed call event #%d on contact %s: %s",
                position,
                contact_id,
                exc.errors(include_url=False),
            )
    return events


def contact_from_record(record: ContactRecord) -> Contact:
    """
    Convert a stored row into a validated Contact.

    Raises ValidationError when the row itself is unusable.
    """
    return Contact(
        id=str(record.id),
        name=record.name,
        phone=record.phone,
        email=record.email,
        tags=record.tags,
        status=record.status,
        call_history=_coerce_call_history(str(record.id), record.call_history),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def list_contacts(session: Session) -> List[Contact]:
    """
    Return every contact, oldest first, ready for aggregation.

    Full scan: windowing happens in the report layer. A row that fails
    validation is skipped with a warning instead of aborting the scan.
    """
    try:
        records: List[ContactRecord] = (
            session.execute(
                select(ContactRecord).order_by(ContactRecord.created_at, ContactRecord.id)
            )
            .scalars()
            .all()
        )
    except Exception:
        logger.exception("Error while fetching contacts")
        raise

    contacts: List[Contact] = []
    for record in records:
        try:
            contacts.append(contact_from_record(record))
        except ValidationError as exc:
            logger.warning(
                "Skipping unreadable contact id=%s: %s",
                record.id,
                exc.errors(include_url=False),
            )

    logger.debug("Loaded %d contacts (%d skipped)", len(contacts), len(records) - len(contacts))
    return contacts


def create_contact(session: Session, contact: Contact) -> ContactRecord:
    """
    Persist a validated Contact.
    """
    data: Dict[str, Any] = contact.model_dump(mode="json", by_alias=True)
    fields: Dict[str, Any] = {
        "id": contact.id,
        "name": contact.name,
        "phone": contact.phone,
        "email": contact.email,
        "tags": list(contact.tags),
        "status": contact.status,
        "call_history": data["callHistory"],
    }
    # Leave unset timestamps to the column defaults.
    if contact.created_at is not None:
        fields["created_at"] = contact.created_at
    if contact.updated_at is not None:
        fields["updated_at"] = contact.updated_at

    try:
        record = ContactRecord(**fields)
        session.add(record)
        session.flush()

        logger.info("Created contact id=%s calls=%d", record.id, len(contact.call_history))
        return record

    except Exception:
        logger.exception("Failed to create contact id=%s", contact.id)
        raise
