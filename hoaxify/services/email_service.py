import asyncio
import functools
import logging
import smtplib
from email.message import EmailMessage
import hoaxify.config
import hoaxify.errors

logger = logging.getLogger(__name__)


def _deliver(recipient: str, subject: str, text: str, html: str) -> None:
    settings = hoaxify.config.settings

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.mail_from
    msg["To"] = recipient
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout) as server:
        if settings.smtp_user:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(msg)


async def send_email(recipient: str, subject: str, text: str, html: str) -> None:
    try:
        await asyncio.get_event_loop().run_in_executor(
            None,
            functools.partial(_deliver, recipient, subject, text, html)
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Sending '{subject}' to {recipient} failed: {str(e)}")
        raise hoaxify.errors.EmailFailure("E-mail failure") from e


async def send_account_activation(email: str, token: str) -> None:
    url = f"{hoaxify.config.settings.app_base_url}/#/login?token={token}"
    await send_email(
        email,
        "Account Activation",
        f"Token is {token}\nActivate your account: {url}",
        f"<div><b>Please click below link to activate your account</b></div>"
        f"<div><a href=\"{url}\">Activate</a></div>"
    )


async def send_password_reset(email: str, token: str) -> None:
    url = f"{hoaxify.config.settings.app_base_url}/#/password-reset?reset={token}"
    await send_email(
        email,
        "Password Reset",
        f"Token is {token}\nReset your password: {url}",
        f"<div><b>Please click below link to reset your password</b></div>"
        f"<div><a href=\"{url}\">Reset</a></div>"
    )
