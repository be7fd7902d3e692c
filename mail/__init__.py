"""
mail — verification-code delivery.

``build_mailer`` picks the backend named by ``Settings.mail_backend``.
"""

from config.settings import Settings
from mail.smtp import ConsoleMailer, SmtpMailer


def build_mailer(settings: Settings):
    if settings.mail_backend == "console":
        return ConsoleMailer()
    if settings.mail_backend == "smtp":
        return SmtpMailer(settings)
    raise ValueError(f"Unknown mail backend: {settings.mail_backend}")
