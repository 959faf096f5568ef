"""
Outbound notifications.
"""

from hireflow.notifications.email_service import EmailResult, EmailService

__all__ = ["EmailResult", "EmailService"]
