"""Claim notifications by email and SMS.

These run as FastAPI background tasks after the response has been sent, so a
failure here never affects the claim write that triggered it.
"""
import logging
from typing import Optional

from ..config import get_settings
from ..database import SessionLocal
from ..models.claim import Claim
from .email import EmailService
from .sms import SmsService

logger = logging.getLogger(__name__)


class ClaimNotifier:
    def __init__(self, email_service=EmailService, sms_service=SmsService, session_factory=SessionLocal):
        self.email_service = email_service
        self.sms_service = sms_service
        self.session_factory = session_factory

    def _load(self, claim_id: int) -> Optional[Claim]:
        db = self.session_factory()
        try:
            claim = db.query(Claim).filter(Claim.id == claim_id).first()
            if claim is not None:
                db.expunge(claim)
            return claim
        finally:
            db.close()

    def claim_created(self, claim_id: int) -> None:
        try:
            claim = self._load(claim_id)
            if claim is None:
                logger.warning(f"Notification skipped, claim {claim_id} not found")
                return
            settings = get_settings()
            self.email_service.send_claim_confirmation(claim)
            self.email_service.send_new_claim_internal(claim)
            if settings.sms_claims_team_phone:
                self.sms_service.send(
                    settings.sms_claims_team_phone,
                    f"New claim submitted: {claim.reference_number} from {claim.claimant_name} "
                    f"at {claim.property_address}. Incident: {claim.incident_type}.",
                )
            self.sms_service.send(
                claim.claimant_phone,
                f"Your insurance claim {claim.reference_number} has been submitted successfully. "
                f"We will review it and contact you soon.",
            )
        except Exception:
            logger.exception(f"Claim-created notification failed for claim {claim_id}")

    def status_changed(self, claim_id: int, old_status: str, new_status: str) -> None:
        try:
            claim = self._load(claim_id)
            if claim is None:
                logger.warning(f"Notification skipped, claim {claim_id} not found")
                return
            settings = get_settings()
            details = f"Changed from {old_status} to {new_status}"
            self.email_service.send_claim_updated_internal(claim, "Status Change", details)
            if settings.sms_claims_team_phone:
                self.sms_service.send(
                    settings.sms_claims_team_phone,
                    f"Claim {claim.reference_number} updated: Status Change. {details}",
                )
            self.sms_service.send(
                claim.claimant_phone,
                f"Your claim {claim.reference_number} has been updated: Status Change. "
                f"Please check your email for details.",
            )
        except Exception:
            logger.exception(f"Status-change notification failed for claim {claim_id}")


notifier = ClaimNotifier()


def get_notifier() -> ClaimNotifier:
    return notifier
