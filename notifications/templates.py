"""
Email template catalog and renderer.

Templates carry `{{variable}}` placeholders in subject and body. Rendering
substitutes the bound variables and leaves any unbound placeholder in the
output verbatim, so a partially filled email is visible rather than an error.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    category: str  # interview, application, offer, rejection, onboarding, automation
    subject: str
    body: str
    variables: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RenderedEmail:
    template_id: str
    subject: str
    body: str


EMAIL_TEMPLATES: List[EmailTemplate] = [
    EmailTemplate(
        id="interview_invitation",
        name="Professional Interview Invitation",
        category="interview",
        subject="Interview Invitation - {{jobTitle}} at {{companyName}}",
        body="""Dear {{candidateName}},

We were impressed by your application for the {{jobTitle}} position at {{companyName}}. We would like to invite you for an interview to discuss this opportunity further.

Interview Details:
- Date: {{interviewDate}}
- Time: {{interviewTime}}
- Location: {{interviewLocation}}
- Interviewer: {{interviewerName}}

Please confirm your attendance by visiting: {{confirmLink}}

Best regards,
{{companyName}} Recruitment Team""",
        variables=[
            "candidateName", "jobTitle", "companyName", "interviewDate",
            "interviewTime", "interviewLocation", "interviewerName", "confirmLink",
        ],
    ),
    EmailTemplate(
        id="application_received",
        name="Application Confirmation",
        category="application",
        subject="Application Received - {{jobTitle}}",
        body="""Dear {{candidateName}},

Thank you for applying for the {{jobTitle}} position at {{companyName}}. We received your application on {{applicationDate}}.

Our team is reviewing your profile and will contact you about next steps.

Best regards,
{{companyName}} Recruitment Team""",
        variables=["candidateName", "jobTitle", "companyName", "applicationDate"],
    ),
    EmailTemplate(
        id="job_offer",
        name="Job Offer",
        category="offer",
        subject="Job Offer - {{jobTitle}} at {{companyName}}",
        body="""Dear {{candidateName}},

We are delighted to offer you the position of {{jobTitle}} at {{companyName}}.

- Salary: {{salary}}
- Start date: {{startDate}}

This offer is valid until {{offerExpiryDate}}. We look forward to welcoming you to the team.

Best regards,
{{companyName}} Recruitment Team""",
        variables=["candidateName", "jobTitle", "companyName", "salary", "startDate", "offerExpiryDate"],
    ),
    EmailTemplate(
        id="rejection",
        name="Polite Rejection Letter",
        category="rejection",
        subject="Update on Your Application - {{jobTitle}}",
        body="""Dear {{candidateName}},

Thank you for your interest in the {{jobTitle}} position at {{companyName}}. After careful consideration, we have decided to move forward with other candidates.

We appreciate the time you invested and wish you success in your search.

Kind regards,
{{companyName}} Recruitment Team""",
        variables=["candidateName", "jobTitle", "companyName"],
    ),
    EmailTemplate(
        id="post_interview_follow_up",
        name="Post-Interview Follow-Up",
        category="interview",
        subject="Thank You for Interviewing - {{jobTitle}}",
        body="""Dear {{candidateName}},

Thank you for meeting with {{interviewerName}} about the {{jobTitle}} role at {{companyName}}.

We expect to share next steps within {{nextStepsTimeline}}.

Best regards,
{{companyName}} Recruitment Team""",
        variables=["candidateName", "jobTitle", "companyName", "interviewerName", "nextStepsTimeline"],
    ),
    EmailTemplate(
        id="onboarding_welcome",
        name="Welcome to the Team",
        category="onboarding",
        subject="Welcome to {{companyName}}!",
        body="""Dear {{candidateName}},

Congratulations and welcome to {{companyName}}! We're thrilled to have you joining us as our new {{jobTitle}} starting on {{startDate}}.

Access the onboarding portal: {{onboardingPortalLink}}

Your manager, {{managerName}}, will reach out soon to discuss your first week.

Warmest welcome,
The {{companyName}} Team""",
        variables=["candidateName", "jobTitle", "companyName", "startDate", "managerName", "onboardingPortalLink"],
    ),
    EmailTemplate(
        id="screening_follow_up",
        name="Screening Follow-Up",
        category="automation",
        subject="Following up on your application at {{companyName}}",
        body="""Hi {{candidateName}},

We noticed your screening with {{companyName}} has been waiting for a few days. If you still have questions to answer or documents to upload, please complete them so we can move forward.

Best regards,
{{companyName}} Recruitment Team""",
        variables=["candidateName", "companyName"],
    ),
    EmailTemplate(
        id="auto_rejection",
        name="Application Closed",
        category="automation",
        subject="Your application at {{companyName}}",
        body="""Dear {{candidateName}},

As we have not seen activity on your application for {{daysInactive}} days, we have closed it. You are welcome to apply again at any time.

Kind regards,
{{companyName}} Recruitment Team""",
        variables=["candidateName", "companyName", "daysInactive"],
    ),
    EmailTemplate(
        id="interview_reminder",
        name="Interview Reminder (24 Hours)",
        category="automation",
        subject="Reminder: Interview Tomorrow - {{jobTitle}}",
        body="""Dear {{candidateName}},

This is a reminder of your {{jobTitle}} interview with {{companyName}}.

- Date: {{interviewDate}}
- Time: {{interviewTime}}
- Location: {{interviewLocation}}

We look forward to speaking with you.

Best regards,
{{companyName}} Recruitment Team""",
        variables=[
            "candidateName", "jobTitle", "companyName",
            "interviewDate", "interviewTime", "interviewLocation",
        ],
    ),
    EmailTemplate(
        id="feedback_reminder",
        name="Interview Feedback Reminder",
        category="automation",
        subject="Feedback pending for {{candidateName}}",
        body="""Hello,

The interview with {{candidateName}} was completed {{daysInactive}} days ago and no decision has been recorded yet. Please submit your feedback so the candidate can move forward.

{{companyName}} Hiring Pipeline""",
        variables=["candidateName", "companyName", "daysInactive"],
    ),
]

_TEMPLATES_BY_ID: Dict[str, EmailTemplate] = {t.id: t for t in EMAIL_TEMPLATES}


def get_email_templates(category: Optional[str] = None) -> List[EmailTemplate]:
    """Return the template catalog, optionally filtered by category."""
    if category is None:
        return list(EMAIL_TEMPLATES)
    return [t for t in EMAIL_TEMPLATES if t.category == category]


def get_email_template(template_id: str) -> Optional[EmailTemplate]:
    return _TEMPLATES_BY_ID.get(template_id)


def _substitute(text: str, variables: Mapping[str, Any]) -> str:
    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in variables and variables[name] is not None:
            return str(variables[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, text)


def render_template(template_id: str, variables: Mapping[str, Any]) -> Optional[RenderedEmail]:
    """
    Fill a template's placeholders.

    Args:
        template_id: Catalog identifier
        variables: Placeholder name -> value

    Returns:
        RenderedEmail, or None if the template id is unknown
    """
    template = get_email_template(template_id)
    if template is None:
        logger.warning(f"Unknown email template requested: {template_id}")
        return None

    return RenderedEmail(
        template_id=template.id,
        subject=_substitute(template.subject, variables),
        body=_substitute(template.body, variables),
    )


def missing_variables(template_id: str, variables: Mapping[str, Any]) -> List[str]:
    """List declared variables of a template that are not bound."""
    template = get_email_template(template_id)
    if template is None:
        return []
    return [name for name in template.variables if variables.get(name) is None]
