from html import escape
from urllib.parse import urlencode

from app.core.config import settings

ROLE_LABELS = {
    "mentor": "mentor",
    "accountability_partner": "accountability partner",
}


def acceptance_link(path: str, **params: str) -> str:
    return f"{settings.app_url.rstrip('/')}/{path}?{urlencode(params)}"


def _personal_message_block(personal_message: str | None) -> str:
    if not personal_message:
        return ""
    return (
        '<p style="margin: 16px 0 4px 0; font-weight: 600;">Personal message:</p>'
        f'<p style="white-space: pre-wrap;">{escape(personal_message)}</p>'
    )


def _layout(heading: str, body: str, link: str) -> str:
    return f"""<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #2563EB;">Career Playbook</h1>
  <h2>{escape(heading)}</h2>
  {body}
  <p style="margin: 32px 0; text-align: center;">
    <a href="{escape(link)}" style="background: #2563EB; color: #fff; padding: 12px 28px;
       border-radius: 8px; text-decoration: none;">Accept Invitation</a>
  </p>
  <p style="color: #9ca3af; font-size: 13px;">This invitation link expires in
    {settings.invitation_ttl_days} days. If you were not expecting it, you can ignore this email.</p>
</div>"""


def plan_invitation_email(
    inviter_name: str,
    inviter_email: str | None,
    role: str,
    plan_title: str,
    personal_message: str | None,
    link: str,
) -> tuple[str, str]:
    """플랜 협업 초대 메일 (제목, HTML)"""
    role_label = ROLE_LABELS.get(role, role)
    subject = f"{inviter_name} invited you to be their {role_label}"
    contact = f" ({escape(inviter_email)})" if inviter_email else ""
    body = (
        f"<p><strong>{escape(inviter_name)}</strong>{contact} has invited you to be their "
        f"<strong>{escape(role_label)}</strong> for the career plan "
        f"<strong>&quot;{escape(plan_title)}&quot;</strong>.</p>"
        + _personal_message_block(personal_message)
    )
    return subject, _layout("You've been invited to collaborate!", body, link)


def mentor_invitation_email(
    inviter_name: str,
    inviter_email: str | None,
    personal_message: str | None,
    link: str,
) -> tuple[str, str]:
    """멘토 초대 메일 (제목, HTML)"""
    subject = f"{inviter_name} invited you to be their mentor on Career Playbook"
    contact = f" ({escape(inviter_email)})" if inviter_email else ""
    body = (
        f"<p><strong>{escape(inviter_name)}</strong>{contact} would like you to mentor them "
        "and follow their career plan progress.</p>" + _personal_message_block(personal_message)
    )
    return subject, _layout("You've been invited to mentor!", body, link)
