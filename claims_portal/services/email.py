import logging
from html import escape

from ..config import get_settings
from ..models.claim import Claim

logger = logging.getLogger(__name__)


class EmailService:
    @staticmethod
    def _send(to_email: str, subject: str, html_content: str) -> bool:
        settings = get_settings()
        api_key = settings.sendgrid_api_key
        from_email = settings.email_from_address

        if not api_key:
            logger.info(f"Email not sent (no SENDGRID_API_KEY): to={to_email} subject={subject}")
            return False

        try:
            from sendgrid import SendGridAPIClient
            from sendgrid.helpers.mail import Mail

            message = Mail(
                from_email=from_email,
                to_emails=to_email,
                subject=subject,
                html_content=html_content,
            )
            sg = SendGridAPIClient(api_key)
            response = sg.send(message)
            logger.info(f"Email sent: to={to_email} subject={subject} status={response.status_code}")
            return response.status_code in (200, 201, 202)
        except Exception as e:
            logger.error(f"Email send failed: to={to_email} subject={subject} error={e}")
            return False

    @staticmethod
    def _claim_summary(claim: Claim) -> str:
        return f"""
            <p><strong>Reference Number:</strong> {escape(claim.reference_number)}</p>
            <p><strong>Claimant:</strong> {escape(claim.claimant_name)}</p>
            <p><strong>Email:</strong> {escape(claim.claimant_email)}</p>
            <p><strong>Phone:</strong> {escape(claim.claimant_phone)}</p>
            <p><strong>Property:</strong> {escape(claim.property_address)}</p>
            <p><strong>Incident Type:</strong> {escape(claim.incident_type.replace('_', ' '))}</p>
            <p><strong>Incident Date:</strong> {claim.incident_date.strftime('%d/%m/%Y')}</p>
        """

    @staticmethod
    def send_claim_confirmation(claim: Claim) -> bool:
        settings = get_settings()
        subject = f"Claim Submitted - Reference: {claim.reference_number}"
        html = f"""
        <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Thank you, {escape(claim.claimant_name)}</h2>
            <p>Your buildings insurance claim has been received.</p>
            <p>Please quote reference <strong>{escape(claim.reference_number)}</strong> in all correspondence.</p>
            {EmailService._claim_summary(claim)}
            <p style="color: #666; font-size: 0.875rem;">If you have any questions, contact us at
            <a href="mailto:{settings.email_claims_team}">{settings.email_claims_team}</a>.</p>
        </div>
        """
        return EmailService._send(claim.claimant_email, subject, html)

    @staticmethod
    def send_new_claim_internal(claim: Claim) -> bool:
        settings = get_settings()
        if not settings.email_claims_team:
            return False
        subject = f"New Claim Submitted - {claim.reference_number}"
        html = f"""
        <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>New Insurance Claim Submitted</h2>
            {EmailService._claim_summary(claim)}
            <p>Please review the claim in the admin portal.</p>
        </div>
        """
        return EmailService._send(settings.email_claims_team, subject, html)

    @staticmethod
    def send_claim_updated_internal(claim: Claim, update_type: str, details: str = "") -> bool:
        settings = get_settings()
        if not settings.email_claims_team:
            return False
        subject = f"Claim Updated - {claim.reference_number}"
        details_html = f"<p><strong>Details:</strong> {escape(details)}</p>" if details else ""
        html = f"""
        <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Insurance Claim Updated</h2>
            <p><strong>Reference Number:</strong> {escape(claim.reference_number)}</p>
            <p><strong>Claimant:</strong> {escape(claim.claimant_name)}</p>
            <p><strong>Update Type:</strong> {escape(update_type)}</p>
            {details_html}
            <p><strong>Current Status:</strong> {escape(claim.status)}</p>
        </div>
        """
        return EmailService._send(settings.email_claims_team, subject, html)
