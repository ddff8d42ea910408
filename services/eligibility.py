"""Rich channel eligibility rules."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from database.repositories import CandidateClient


class EligibilityReason(str, Enum):
    """Why the rich channel cannot be used."""
    MISSING_PHONE = "missing_phone"
    NO_CONSENT = "no_consent_whatsapp"


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    reason: Optional[EligibilityReason] = None


def has_phone(phone: object) -> bool:
    return isinstance(phone, str) and bool(phone.strip())


def resolve_eligibility(client: Optional[CandidateClient]) -> Eligibility:
    """
    Decide whether the WhatsApp channel may be used for a client.

    Missing phone wins over missing consent when both are absent.
    """
    phone = client.phone if client else None
    if not has_phone(phone):
        return Eligibility(eligible=False, reason=EligibilityReason.MISSING_PHONE)
    if client.consent_whatsapp is not True:
        return Eligibility(eligible=False, reason=EligibilityReason.NO_CONSENT)
    return Eligibility(eligible=True)
