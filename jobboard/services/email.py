"""Email service for application status notifications."""
import logging
from typing import Optional

from jobboard.config import settings
from jobboard.models.application import ApplicationStatus

logger = logging.getLogger(__name__)

# Statuses that notify the candidate
NOTIFY_STATUSES = (
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.SHORTLISTED,
)

_SUBJECTS = {
    ApplicationStatus.ACCEPTED: "Application Accepted",
    ApplicationStatus.REJECTED: "Application Update",
    ApplicationStatus.SHORTLISTED: "Application Shortlisted",
}

_BODIES = {
    ApplicationStatus.ACCEPTED: (
        "Congratulations! Your application for {job_title} at {company} has been accepted. "
        "{employer_name} will contact you shortly with next steps."
    ),
    ApplicationStatus.REJECTED: (
        "Thank you for your interest in {job_title} at {company}. After careful consideration, "
        "{employer_name} has decided not to move forward with your application."
    ),
    ApplicationStatus.SHORTLISTED: (
        "Good news! Your application for {job_title} at {company} has been shortlisted. "
        "{employer_name} will be in touch about the next stage."
    ),
}


class EmailService:
    """Handles email sending in dev and production modes."""

    def __init__(self):
        self.mode = settings.email_mode
        if self.mode == "prod":
            try:
                from sendgrid import SendGridAPIClient
                self.sendgrid_client = SendGridAPIClient(settings.sendgrid_api_key)
            except ImportError:
                logger.error("SendGrid not installed but email_mode is 'prod'")
                raise
        else:
            self.sendgrid_client = None

    async def send_application_status_email(
        self,
        email: str,
        candidate_name: str,
        job_title: str,
        company: str,
        employer_name: str,
        status: ApplicationStatus,
        reply_to: Optional[str] = None
    ) -> bool:
        """Tell a candidate their application was accepted, rejected or shortlisted."""
        status = ApplicationStatus(status)
        if status not in NOTIFY_STATUSES:
            return False

        message = _BODIES[status].format(job_title=job_title, company=company, employer_name=employer_name)

        html_content = f"""
        <html>
            <body style="font-family: Arial, sans-serif; background-color: #f4f4f4; padding: 20px;">
                <div style="max-width: 600px; margin: 0 auto; background-color: white; padding: 40px; border-radius: 8px;">
                    <h2 style="color: #333; margin-bottom: 20px;">{_SUBJECTS[status]}</h2>
                    <p style="color: #666; font-size: 16px; line-height: 1.6;">Hi {candidate_name},</p>
                    <p style="color: #666; font-size: 16px; line-height: 1.6;">{message}</p>
                    <p style="color: #999; font-size: 14px; margin-top: 30px;">{employer_name}, {company}</p>
                </div>
            </body>
        </html>
        """

        text_content = f"""
        Hi {candidate_name},

        {message}

        {employer_name}, {company}
        """

        return await self._send_email(email, _SUBJECTS[status], text_content, html_content, reply_to)

    async def _send_email(
        self,
        to_email: str,
        subject: str,
        text_content: str,
        html_content: str,
        reply_to: Optional[str] = None
    ) -> bool:
        """Internal method to send email via SendGrid or dev console."""
        if self.mode == "dev":
            logger.info(f"[DEV MODE] Email to {to_email}: {subject}")
            logger.info(f"[DEV MODE] Content:\n{text_content}")
            return True

        try:
            from sendgrid.helpers.mail import Mail, Email, To, Content, ReplyTo

            mail = Mail(
                from_email=Email(settings.email_from, "Job Board"),
                to_emails=To(to_email),
                subject=subject,
                plain_text_content=Content("text/plain", text_content),
                html_content=Content("text/html", html_content)
            )
            if reply_to:
                mail.reply_to = ReplyTo(reply_to)

            response = self.sendgrid_client.send(mail)

            if 200 <= response.status_code < 300:
                logger.info(f"Email sent to {to_email}: {subject}")
                return True
            else:
                logger.error(f"Failed to send email to {to_email}: {response.status_code}")
                return False
        except Exception as e:
            logger.error(f"Error sending email to {to_email}: {str(e)}")
            return False


# Global email service instance
email_service = EmailService()
