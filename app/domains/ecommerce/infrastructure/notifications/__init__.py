"""Customer notification senders."""

from .logging_email_sender import LoggingEmailSender

__all__ = ["LoggingEmailSender"]
