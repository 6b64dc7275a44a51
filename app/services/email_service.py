# app/services/email_service.py
"""Outbound email through the Resend HTTP API."""
import html
import logging
from typing import Any, Dict, List, Union

import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


class EmailServiceException(Exception):
    """Raised when the email provider cannot be reached or rejects a message"""
    pass


class EmailService:
    def __init__(self):
        self.api_key = settings.resend_api_key
        if not self.api_key:
            raise EmailServiceException("RESEND_API_KEY is not set")

        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    async def send(self, to: Union[str, List[str]], subject: str, html_body: str) -> str:
        """Send one message and return the provider's message id"""
        payload = {
            "from": settings.email_from,
            "to": [to] if isinstance(to, str) else to,
            "subject": subject,
            "html": html_body,
        }

        try:
            async with httpx.AsyncClient(timeout=15.0) as client:
                response = await client.post(RESEND_URL, headers=self.headers, json=payload)
                response.raise_for_status()
                return response.json().get("id", "")
        except httpx.TimeoutException:
            logger.error("Email provider request timeout")
            raise EmailServiceException("Email provider timeout")
        except httpx.HTTPStatusError as e:
            logger.error(f"Email provider HTTP error: {e.response.status_code} - {e.response.text}")
            raise EmailServiceException(f"Email provider error: {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Email provider transport error: {e}")
            raise EmailServiceException(f"Email provider error: {str(e)}")


def render_password_reset_email(code: str) -> str:
    return f"""
    <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
      <h1>Reset Your Password</h1>
      <p>We received a request to reset your password for your Attendance App account.
      Use the verification code below to complete the password reset process.</p>
      <p style="font-size: 36px; font-weight: 700; letter-spacing: 8px;">{code}</p>
      <p><strong>Security Notice:</strong> This code will expire in {settings.reset_code_ttl_minutes} minutes.
      If you didn't request this password reset, please ignore this email.</p>
    </div>
    """


def render_notification_email(title: str, message: str) -> str:
    body = html.escape(message).replace("**", "")
    return f"""
    <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
      <h2>{html.escape(title)}</h2>
      <p>{body}</p>
      <p><a href="{settings.app_url}">Open the dashboard</a></p>
    </div>
    """


def render_report_email(report: Dict[str, Any]) -> str:
    summary = report["summary"]
    rows = "".join(
        f"<tr><td>{html.escape(str(item['student']))}</td><td>{item['present']}</td>"
        f"<td>{item['absent']}</td><td>{item['late']}</td><td>{item['total']}</td></tr>"
        for item in report["charts"]["by_student"]
    )
    return f"""
    <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
      <h2>Attendance report ({report['type']})</h2>
      <p>{report['start_date']} to {report['end_date']}</p>
      <ul>
        <li>Total records: {summary['total_records']}</li>
        <li>Present: {summary['present_count']}</li>
        <li>Absent: {summary['absent_count']}</li>
        <li>Late: {summary['late_count']}</li>
        <li>Attendance rate: {summary['attendance_rate']}%</li>
      </ul>
      <table>
        <tr><th>Student</th><th>Present</th><th>Absent</th><th>Late</th><th>Total</th></tr>
        {rows}
      </table>
    </div>
    """
