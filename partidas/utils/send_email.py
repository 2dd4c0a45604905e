import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

import sendgrid
from sendgrid.helpers.mail import Bcc, Email, Mail, To

from ..config import Settings
from ..errors import MailDeliveryFailure
from ..notifications import ComposedMessage

logger = logging.getLogger(__name__)

SENDER_NAME = "Consultas ABL"
SUBJECT = "Consulta de ABL"


def _send_smtp(recipient: str, message: ComposedMessage, settings: Settings) -> None:
    msg = EmailMessage()
    msg["Subject"] = SUBJECT
    msg["From"] = formataddr((SENDER_NAME, settings.smtp_from))
    msg["To"] = recipient
    msg.set_content(message.text)
    msg.add_alternative(message.html, subtype="html")

    recipients = [recipient]
    if settings.smtp_bcc:
        recipients.append(settings.smtp_bcc)

    # The relay presents a certificate that does not verify
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context) as s:
        if settings.smtp_user:
            s.login(settings.smtp_user, settings.smtp_pass)
        s.send_message(msg, to_addrs=recipients)


def _send_sendgrid(recipient: str, message: ComposedMessage, settings: Settings) -> None:
    sg = sendgrid.SendGridAPIClient(api_key=settings.sendgrid_api_key)
    mail = Mail(
        from_email=Email(settings.smtp_from, SENDER_NAME),
        to_emails=To(recipient),
        subject=SUBJECT,
        plain_text_content=message.text,
        html_content=message.html,
    )
    if settings.smtp_bcc:
        mail.add_bcc(Bcc(settings.smtp_bcc))

    response = sg.client.mail.send.post(request_body=mail.get())
    if response.status_code != 202:
        raise RuntimeError(f"SendGrid answered with status code {response.status_code}")


async def send_email(recipient: str, message: ComposedMessage, settings: Settings) -> None:
    """
    Send the composed partida email to the recipient.

    The transport is picked with MAIL_TRANSPORT: "smtp" (default) or "sendgrid".
    Both clients block, so the send runs in a worker thread.

    Raises:
        MailDeliveryFailure: The transport rejected the message or is misconfigured
    """
    if settings.mail_transport == "sendgrid":
        sender = _send_sendgrid
    elif settings.mail_transport == "smtp":
        sender = _send_smtp
    else:
        raise MailDeliveryFailure(recipient, f"unknown mail transport {settings.mail_transport!r}")

    try:
        await asyncio.to_thread(sender, recipient, message, settings)
    except Exception as e:
        logger.error(f"❌ Error sending email to {recipient}: {e}")
        raise MailDeliveryFailure(recipient, str(e)) from e

    logger.info(f"✅ Email sent successfully to {recipient}")
