"""
Transactional email templates: subscription welcome, inquiry, partner request
and job application acknowledgements plus the matching admin notifications.

Every builder returns a ready-to-send :class:`OutgoingEmail`. User-supplied
values are HTML-escaped in the HTML part.
"""

from datetime import UTC, datetime
from html import escape
from typing import Optional

from adapters.email.base import OutgoingEmail
from infrastructure.config.settings import settings

_WRAPPER_STYLE = "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; color: #1a1a1a;"
_P_STYLE = "color: #4a5568; line-height: 1.6;"
_BOX_STYLE = "background: #f7fafc; padding: 20px; border-radius: 8px; margin: 20px 0;"
_QUOTE_STYLE = "background: #fff; padding: 20px; border-left: 4px solid #FFD600; margin: 20px 0;"
_BUTTON_STYLE = (
    "display: inline-block; background: #FFD600; color: #000; padding: 14px 30px; "
    "text-decoration: none; border-radius: 8px; font-weight: 700;"
)


def _or(value: Optional[str], fallback: str) -> str:
    return value if value else fallback


def _submitted_on() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")


def _info_rows(rows: list[tuple[str, str]]) -> str:
    return "\n".join(
        f'<p style="margin: 8px 0; color: #4a5568;">• <strong>{escape(label)}:</strong> {escape(value)}</p>'
        for label, value in rows
    )


def _admin_link(collection: str, record_id: str) -> str:
    return (
        f"{settings.public_url}/admin/content-manager/collection-types/"
        f"{collection}/{record_id}"
    )


# ---------------------------------------------------------------------------
# Newsletter
# ---------------------------------------------------------------------------

def welcome_email(to_email: str, name: str, categories: list[str]) -> OutgoingEmail:
    """Welcome message sent once when a new subscription is created."""
    topics = ", ".join(categories) if categories else "all topics"
    text = f"""Hi {name},

Thank you for subscribing to the Autointelli newsletter. You will now receive curated updates and insights related to {topics}, delivered directly to your inbox.

We look forward to keeping you informed.

Best regards,
Autointelli Team"""

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">Welcome to Autointelli Newsletter</h2>
  <p style="{_P_STYLE}">Hi {escape(name)},</p>
  <p style="{_P_STYLE}">
    Thank you for subscribing to the Autointelli newsletter. You will now receive curated updates and insights related to <strong>{escape(topics)}</strong>, delivered directly to your inbox.
  </p>
  <p style="{_P_STYLE}">We look forward to keeping you informed.</p>
  <p style="{_P_STYLE} margin-top: 30px;">Best regards,<br><strong>Autointelli Team</strong></p>
</div>""".strip()

    return OutgoingEmail(
        to=to_email,
        from_email=settings.smtp_from,
        subject="Welcome to Autointelli Newsletter",
        text=text,
        html=html,
    )


# ---------------------------------------------------------------------------
# CTA inquiries
# ---------------------------------------------------------------------------

def inquiry_admin_email(inquiry) -> OutgoingEmail:
    """Notify the site admin about a new inquiry."""
    rows = [
        ("Name", inquiry.name),
        ("Email", inquiry.email),
        ("Phone", _or(inquiry.phone, "Not provided")),
        ("Company", _or(inquiry.company, "Not provided")),
        ("Service Requested", _or(inquiry.service_requested, "Not specified")),
        ("Source Page", _or(inquiry.source_page, "Unknown")),
    ]
    admin_url = _admin_link("api::cta-inquiry.cta-inquiry", inquiry.id)
    submitted = _submitted_on()

    text = "A new customer inquiry has been received.\n\nContact Information\n"
    text += "\n".join(f"• {label}: {value}" for label, value in rows)
    text += f"\n\nMessage\n{inquiry.message}\n\nSubmitted On: {submitted}\n\n"
    text += f"Please review this inquiry in the Admin Panel.\n{admin_url}"

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">New Inquiry from {escape(inquiry.name)}</h2>
  <p style="color: #4a5568; margin-bottom: 20px;">A new customer inquiry has been received.</p>
  <div style="{_BOX_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 15px;">Contact Information</h3>
    {_info_rows(rows)}
  </div>
  <div style="{_QUOTE_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 10px;">Message</h3>
    <p style="{_P_STYLE} margin: 0;">{escape(inquiry.message)}</p>
  </div>
  <p style="color: #718096; font-size: 0.9rem; margin-top: 30px;"><strong>Submitted On:</strong> {submitted}</p>
  <p style="margin-top: 20px;"><a href="{admin_url}" style="color: #4a5568; text-decoration: underline;">Please review this inquiry in the Admin Panel.</a></p>
</div>""".strip()

    return OutgoingEmail(
        to=settings.admin_email,
        from_email=settings.smtp_from,
        subject=f"New Inquiry from {inquiry.name}",
        text=text,
        html=html,
    )


def inquiry_thank_you_email(inquiry) -> OutgoingEmail:
    """Acknowledge an inquiry and offer a meeting link."""
    text = f"""Hi {inquiry.name},

Thank you for reaching out to Autointelli. Your inquiry has been received, and our team will respond shortly.

If you would like to schedule a discussion at your convenience, please use the link below:
{settings.calendly_link}

Your Message
{inquiry.message}

Best regards,
Autointelli Team

This is an automated message. Please do not reply."""

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">Thank You for Contacting Autointelli</h2>
  <p style="{_P_STYLE}">Hi {escape(inquiry.name)},</p>
  <p style="{_P_STYLE}">Thank you for reaching out to Autointelli. Your inquiry has been received, and our team will respond shortly.</p>
  <p style="{_P_STYLE}">If you would like to schedule a discussion at your convenience, please use the link below:</p>
  <div style="margin: 30px 0; text-align: center;">
    <a href="{settings.calendly_link}" style="{_BUTTON_STYLE}">Schedule a Meeting →</a>
  </div>
  <div style="{_QUOTE_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 10px;">Your Message</h3>
    <p style="{_P_STYLE} margin: 0;">{escape(inquiry.message)}</p>
  </div>
  <p style="{_P_STYLE} margin-top: 30px;">Best regards,<br><strong>Autointelli Team</strong></p>
  <p style="color: #718096; font-size: 0.85rem;">This is an automated message. Please do not reply.</p>
</div>""".strip()

    return OutgoingEmail(
        to=inquiry.email,
        from_email=settings.smtp_from,
        subject="Thank You for Contacting Autointelli",
        text=text,
        html=html,
    )


# ---------------------------------------------------------------------------
# Partner requests
# ---------------------------------------------------------------------------

def partner_admin_email(request) -> OutgoingEmail:
    """Notify the site admin about a new partnership request."""
    rows = [
        ("Company Name", request.company_name),
        ("Contact Person", request.contact_name),
        ("Business Email", request.business_email),
        ("Phone Number", _or(request.phone_number, "Not provided")),
        ("Partnership Type", request.partner_type),
    ]
    admin_url = _admin_link("api::partner-request.partner-request", request.id)
    submitted = _submitted_on()

    text = "A new partnership request has been submitted.\n\nCompany Information\n"
    text += "\n".join(f"• {label}: {value}" for label, value in rows)
    text += f"\n\nBusiness Overview\n{request.about_business}\n\nSubmitted On: {submitted}\n\n"
    text += f"Please review this request in the Admin Panel.\n{admin_url}"

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">New Partnership Request from {escape(request.company_name)}</h2>
  <p style="color: #4a5568; margin-bottom: 20px;">A new partnership request has been submitted.</p>
  <div style="{_BOX_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 15px;">Company Information</h3>
    {_info_rows(rows)}
  </div>
  <div style="{_QUOTE_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 10px;">Business Overview</h3>
    <p style="{_P_STYLE} margin: 0;">{escape(request.about_business)}</p>
  </div>
  <p style="color: #718096; font-size: 0.9rem; margin-top: 30px;"><strong>Submitted On:</strong> {submitted}</p>
  <p style="margin-top: 20px;"><a href="{admin_url}" style="color: #4a5568; text-decoration: underline;">Please review this request in the Admin Panel.</a></p>
</div>""".strip()

    return OutgoingEmail(
        to=settings.admin_email,
        from_email=settings.smtp_from,
        subject=f"New Partnership Request from {request.company_name}",
        text=text,
        html=html,
    )


def partner_thank_you_email(request) -> OutgoingEmail:
    """Acknowledge a partnership request."""
    text = f"""Hi {request.contact_name},

Thank you for your interest in partnering with Autointelli. We have received the request from {request.company_name} and our partnerships team will review it shortly.

If you would like to schedule a discussion at your convenience, please use the link below:
{settings.calendly_link}

Best regards,
Autointelli Partnerships Team

This is an automated message. Please do not reply."""

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">Thank You for Your Partnership Interest</h2>
  <p style="{_P_STYLE}">Hi {escape(request.contact_name)},</p>
  <p style="{_P_STYLE}">Thank you for your interest in partnering with Autointelli. We have received the request from <strong>{escape(request.company_name)}</strong> and our partnerships team will review it shortly.</p>
  <div style="margin: 30px 0; text-align: center;">
    <a href="{settings.calendly_link}" style="{_BUTTON_STYLE}">Schedule a Meeting →</a>
  </div>
  <p style="{_P_STYLE} margin-top: 30px;">Best regards,<br><strong>Autointelli Partnerships Team</strong></p>
  <p style="color: #718096; font-size: 0.85rem;">This is an automated message. Please do not reply.</p>
</div>""".strip()

    return OutgoingEmail(
        to=request.business_email,
        from_email=settings.smtp_from,
        subject="Thank You for Your Partnership Interest – Autointelli",
        text=text,
        html=html,
    )


# ---------------------------------------------------------------------------
# Job applications
# ---------------------------------------------------------------------------

def application_received_email(application) -> OutgoingEmail:
    """Acknowledge a job application to the applicant."""
    text = f"""Dear {application.full_name},

Thank you for applying for the position of {application.job_title} at Autointelli. Your application has been received and shared with our HR team for evaluation. If your profile aligns with our requirements, we will contact you to discuss the next steps.

HR Contact
Email: {settings.careers_from_email}
Phone: {settings.hr_phone}

For any queries, feel free to reach out to our HR department.

Best regards,
Autointelli HR Team"""

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">Application Received – Autointelli</h2>
  <p style="{_P_STYLE}">Dear {escape(application.full_name)},</p>
  <p style="{_P_STYLE}">
    Thank you for applying for the position of <strong>{escape(application.job_title)}</strong> at Autointelli. Your application has been received and shared with our HR team for evaluation. If your profile aligns with our requirements, we will contact you to discuss the next steps.
  </p>
  <div style="{_BOX_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 15px;">HR Contact</h3>
    <p style="margin: 8px 0; color: #4a5568;"><strong>Email:</strong> {settings.careers_from_email}</p>
    <p style="margin: 8px 0; color: #4a5568;"><strong>Phone:</strong> {settings.hr_phone}</p>
  </div>
  <p style="{_P_STYLE}">For any queries, feel free to reach out to our HR department.</p>
  <p style="{_P_STYLE} margin-top: 30px;">Best regards,<br><strong>Autointelli HR Team</strong></p>
</div>""".strip()

    return OutgoingEmail(
        to=application.email,
        from_email=settings.careers_from_email,
        subject="Application Received – Autointelli",
        text=text,
        html=html,
    )


def application_admin_email(application) -> OutgoingEmail:
    """Notify HR about a new job application."""
    rows = [
        ("Full Name", application.full_name),
        ("Email", application.email),
        ("Phone", application.phone),
    ]
    if application.years_of_experience is not None:
        rows.append(("Experience", f"{application.years_of_experience} years"))
    if application.current_company:
        rows.append(("Current Company", application.current_company))

    text = f"A new job application has been submitted for the {application.job_title} position.\n\n"
    text += "Applicant Information\n"
    text += "\n".join(f"• {label}: {value}" for label, value in rows)
    text += "\n\nPlease review the complete application in the Admin Dashboard."

    html = f"""
<div style="{_WRAPPER_STYLE}">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">New Job Application – {escape(application.job_title)}</h2>
  <p style="color: #4a5568; margin-bottom: 20px;">A new job application has been submitted for the <strong>{escape(application.job_title)}</strong> position.</p>
  <div style="{_BOX_STYLE}">
    <h3 style="color: #1a1a1a; margin-top: 0; margin-bottom: 15px;">Applicant Information</h3>
    {_info_rows(rows)}
  </div>
  <p style="{_P_STYLE}">Please review the complete application in the Admin Dashboard.</p>
</div>""".strip()

    return OutgoingEmail(
        to=settings.careers_admin_email,
        from_email=settings.smtp_from,
        subject=f"New Job Application – {application.job_title}",
        text=text,
        html=html,
    )
