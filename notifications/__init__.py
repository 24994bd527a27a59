"""
Notifications module - email templates, outbox queue and delivery.
"""

from notifications.templates import (
    EmailTemplate,
    RenderedEmail,
    get_email_template,
    get_email_templates,
    missing_variables,
    render_template,
)
from notifications.email_sender import (
    DeliveryResult,
    EmailSender,
    HttpEmailSender,
    LoggingEmailSender,
    get_email_sender,
)
from notifications.email_queue import DrainResult, EmailQueue

__all__ = [
    "EmailTemplate",
    "RenderedEmail",
    "get_email_template",
    "get_email_templates",
    "missing_variables",
    "render_template",
    "DeliveryResult",
    "EmailSender",
    "HttpEmailSender",
    "LoggingEmailSender",
    "get_email_sender",
    "DrainResult",
    "EmailQueue",
]
