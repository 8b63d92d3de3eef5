from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import vobject

from ..errors import NoContactsFound, NoNameMapped, SerializationFailure
from ..models.contact_record import ContactRecord
from ..models.tabular import RowRecord, TabularDataset
from .projector import project

"""vCard generation for projected contacts.

Each ContactRecord becomes one vCard block built with vobject:

- N: given = first whitespace token of the name, family = the rest
- FN: trimmed name
- TEL;TYPE=CELL / EMAIL;TYPE=INTERNET / ORG copied directly
- address -> ADR;TYPE=HOME street line + LABEL;TYPE=HOME:Home Address

Blocks are joined with a newline in input order.
"""

__all__ = [
    "HOME_ADDRESS_LABEL",
    "split_name",
    "contact_to_vcard",
    "generate_vcf",
    "build_vcf",
]

logger = logging.getLogger(__name__)

HOME_ADDRESS_LABEL = "Home Address"


def split_name(name: str) -> tuple[str, str]:
    """Split a full name into (first, last). "Mary Ann Smith" -> ("Mary", "Ann Smith")."""
    parts = name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def contact_to_vcard(contact: ContactRecord) -> vobject.base.Component:
    card = vobject.vCard()

    if contact.name:
        first, last = split_name(contact.name)
        card.add("n").value = vobject.vcard.Name(family=last, given=first)
        card.add("fn").value = contact.name.strip()

    if contact.phone:
        tel = card.add("tel")
        tel.value = contact.phone
        tel.type_param = "CELL"

    if contact.email:
        email = card.add("email")
        email.value = contact.email
        email.type_param = "INTERNET"

    if contact.organization:
        card.add("org").value = [contact.organization]

    if contact.address:
        adr = card.add("adr")
        adr.value = vobject.vcard.Address(street=contact.address)
        adr.type_param = "HOME"
        label = card.add("label")
        label.value = HOME_ADDRESS_LABEL
        label.type_param = "HOME"

    return card


def generate_vcf(contacts: Sequence[ContactRecord]) -> str:
    """Render contacts as concatenated vCard blocks."""
    blocks: list[str] = []
    for contact in contacts:
        try:
            blocks.append(contact_to_vcard(contact).serialize())
        except Exception as e:
            raise SerializationFailure(f"failed to build vCard for {contact.name!r}: {e}") from e
    return "\n".join(blocks)


def build_vcf(
    source: TabularDataset | Sequence[RowRecord], mapping: Mapping[str, str]
) -> str:
    """Check VCF preconditions, project rows and render them.

    Raises:
        NoNameMapped: mapping has no `name` entry (checked before projecting)
        NoContactsFound: no row has a non-empty mapped name

    Returns:
        vCard text for every projected contact
    """
    if not mapping.get("name"):
        raise NoNameMapped("map a name column before exporting contacts")
    rows = source.rows if isinstance(source, TabularDataset) else source
    contacts = project(rows, mapping)
    if not contacts:
        raise NoContactsFound("no valid contact data to export")
    logger.debug(f"vcf contacts={len(contacts)}")
    return generate_vcf(contacts)
