"""
Small SMTP helpers for the account emails (verification, password reset).
"""
from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from html import escape

from flask import current_app, url_for

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, html: str) -> None:
    """Send an HTML email using the MAIL_* settings of the current app.

    With MAIL_SUPPRESS_SEND the message is logged and kept in
    app.extensions["mail_outbox"] instead of going over SMTP.
    """
    config = current_app.config
    sender = config.get("MAIL_FROM") or config.get("MAIL_USERNAME")

    msg = MIMEText(html, "html")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to_email

    if config.get("MAIL_SUPPRESS_SEND"):
        current_app.extensions.setdefault("mail_outbox", []).append(msg)
        logger.info("Mail suppressed: %r to %s", subject, to_email)
        return

    username = config.get("MAIL_USERNAME")
    password = config.get("MAIL_PASSWORD")
    if not (username and password):
        raise RuntimeError("Email credentials not configured. Set MAIL_USERNAME and MAIL_PASSWORD.")

    with smtplib.SMTP(config["MAIL_SERVER"], config["MAIL_PORT"]) as server:
        if config.get("MAIL_USE_TLS", True):
            server.starttls()
        server.login(username, password)
        server.sendmail(sender, [to_email], msg.as_string())
    logger.info("Mail sent: %r to %s", subject, to_email)


def _deliver(to_email: str, subject: str, html: str) -> bool:
    # Account state is already committed when these are sent; a mail outage
    # is logged rather than turned into a failed request.
    try:
        send_email(to_email, subject, html)
        return True
    except (smtplib.SMTPException, OSError, RuntimeError):
        logger.exception("Could not send %r to %s", subject, to_email)
        return False


def send_verification_email(user) -> bool:
    link = url_for("auth.verify_email", token=user.email_token, _external=True)
    html = f"""<h2>Welcome, {escape(user.name)}!</h2>
<br/>
<p>Thank you for registering, you are almost done. Please read the below message to continue.</p>
<br/>
<p>In order to confirm your email, kindly click the verification link below.</p>
<br/>
<a href="{escape(link)}">Click here to verify</a>"""
    return _deliver(user.email, "Email Verification", html)


def send_reset_password_email(user, token: str) -> bool:
    link = url_for("auth.reset_password", token=token, _external=True)
    html = f"""<h2>Dear, {escape(user.name)}.</h2>
<br/>
<p>Your reset password link is available below.</p>
<br/>
<a href="{escape(link)}">Reset</a>"""
    return _deliver(user.email, "Reset Password", html)
