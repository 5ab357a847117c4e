"""
E-mail Templates
Subject and HTML body for every outbound notification
"""
from html import escape
from typing import Any, Callable, Dict, Tuple

from core.config import settings
from core.exceptions import ValidationException
from domain.enums import NotificationTemplate
from application.services.notifications import IEmailTemplateRenderer


STATUS_COLORS = {
    "hired": "#059669",
    "interview": "#2563eb",
    "rejected": "#dc2626",
}

STATUS_MESSAGES = {
    "interview": "The employer would like to interview you. They will contact you with details soon.",
    "hired": "Congratulations! You have been selected for this position.",
    "rejected": (
        "Thank you for your interest. You were not selected for this role, "
        "but we encourage you to keep applying."
    ),
}


def _layout(heading: str, body: str) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #2563eb; text-align: center;">{escape(settings.MAIL_FROM_NAME)}</h1>
  <h2 style="text-align: center;">{heading}</h2>
  {body}
  <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">
  <p style="font-size: 14px; color: #6b7280; text-align: center;">
    Best regards,<br><strong>The {escape(settings.MAIL_FROM_NAME)} Team</strong>
  </p>
</div>
"""


def _button(href: str, label: str) -> str:
    return (
        f'<p style="text-align: center;"><a href="{escape(href)}" '
        f'style="background-color: #2563eb; color: white; padding: 12px 30px; '
        f'text-decoration: none; border-radius: 6px;">{escape(label)}</a></p>'
    )


def employer_approved(ctx: Dict[str, Any]) -> Tuple[str, str]:
    name = escape(ctx.get("company_name", ""))
    body = (
        f"<p>Dear {name},</p>"
        "<p>Your employer account has been <strong>approved</strong>. You can now post jobs "
        "and manage applications from your dashboard.</p>"
        + _button(ctx.get("login_url") or f"{settings.FRONTEND_URL}/employer/dashboard", "Access Your Dashboard")
    )
    return "Your Employer Account Has Been Approved!", _layout("Congratulations!", body)


def employer_rejected(ctx: Dict[str, Any]) -> Tuple[str, str]:
    name = escape(ctx.get("company_name", ""))
    reason = ctx.get("reason")
    body = (
        f"<p>Dear {name},</p>"
        "<p>After reviewing your application, we are unable to approve your employer account at this time.</p>"
    )
    if reason:
        body += f"<p><strong>Reason:</strong> {escape(reason)}</p>"
    body += "<p>If you believe this is an error, please contact our support team.</p>"
    return "Update on Your Employer Account Application", _layout("Account Application Update", body)


def application_status_update(ctx: Dict[str, Any]) -> Tuple[str, str]:
    status = str(ctx.get("status", ""))
    job_title = ctx.get("job_title", "")
    color = STATUS_COLORS.get(status, "#6b7280")
    body = (
        f"<p>Dear {escape(ctx.get('applicant_name', ''))},</p>"
        f"<p>We have an update on your application for <strong>{escape(job_title)}</strong> "
        f"at <strong>{escape(ctx.get('company_name', ''))}</strong>.</p>"
        f'<p style="text-align: center; font-size: 18px;"><strong>Status:</strong> '
        f'<span style="color: {color}; text-transform: capitalize;">{escape(status)}</span></p>'
    )
    if status in STATUS_MESSAGES:
        body += f"<p>{STATUS_MESSAGES[status]}</p>"
    body += _button(f"{settings.FRONTEND_URL}/user/dashboard", "View Dashboard")
    return f"Application Update: {job_title}", _layout("Application Status Update", body)


def interview_invitation(ctx: Dict[str, Any]) -> Tuple[str, str]:
    job_title = ctx.get("job_title", "")
    body = (
        f"<p>Dear {escape(ctx.get('applicant_name', ''))},</p>"
        f"<p><strong>{escape(ctx.get('company_name', ''))}</strong> would like to invite you to an "
        f"interview for the <strong>{escape(job_title)}</strong> position.</p>"
        "<ul>"
        f"<li><strong>Date:</strong> {escape(ctx.get('date', ''))}</li>"
        f"<li><strong>Time:</strong> {escape(ctx.get('time', ''))}</li>"
        f"<li><strong>Location:</strong> {escape(ctx.get('location', ''))}</li>"
        "</ul>"
    )
    if ctx.get("additional_notes"):
        body += f"<p><strong>Additional notes:</strong> {escape(ctx['additional_notes'])}</p>"
    return f"Interview Invitation: {job_title}", _layout("Interview Invitation", body)


def welcome_jobseeker(ctx: Dict[str, Any]) -> Tuple[str, str]:
    body = (
        f"<p>Dear {escape(ctx.get('name', ''))},</p>"
        "<p>Welcome aboard! Your account is ready. Complete your profile and start applying "
        "to jobs that match your skills.</p>"
        + _button(f"{settings.FRONTEND_URL}/jobs", "Browse Jobs")
    )
    return f"Welcome to {settings.MAIL_FROM_NAME}!", _layout("Welcome!", body)


TEMPLATES: Dict[NotificationTemplate, Callable[[Dict[str, Any]], Tuple[str, str]]] = {
    NotificationTemplate.EMPLOYER_APPROVED: employer_approved,
    NotificationTemplate.EMPLOYER_REJECTED: employer_rejected,
    NotificationTemplate.APPLICATION_STATUS_UPDATE: application_status_update,
    NotificationTemplate.INTERVIEW_INVITATION: interview_invitation,
    NotificationTemplate.WELCOME_JOBSEEKER: welcome_jobseeker,
}


class EmailTemplateRenderer(IEmailTemplateRenderer):
    """Looks templates up by name"""

    def render(self, template, context: Dict[str, Any]) -> Tuple[str, str]:
        try:
            key = NotificationTemplate(template)
        except ValueError:
            raise ValidationException("template", f"Unknown email template: {template}")
        renderer = TEMPLATES.get(key)
        if renderer is None:
            raise ValidationException("template", f"Unknown email template: {template}")
        return renderer(context or {})
