"""
Unit tests for the email template catalog and renderer.

Run: pytest tests/unit/test_templates.py -v
"""

from notifications.templates import (
    EMAIL_TEMPLATES,
    PLACEHOLDER_PATTERN,
    get_email_template,
    get_email_templates,
    missing_variables,
    render_template,
)


class TestCatalog:

    def test_template_ids_are_unique(self):
        ids = [t.id for t in EMAIL_TEMPLATES]
        assert len(ids) == len(set(ids))

    def test_every_placeholder_is_declared(self):
        for template in EMAIL_TEMPLATES:
            used = set(PLACEHOLDER_PATTERN.findall(template.subject + template.body))
            assert used <= set(template.variables), template.id

    def test_automation_templates_present(self):
        for template_id in ("screening_follow_up", "auto_rejection", "interview_reminder", "feedback_reminder"):
            assert get_email_template(template_id) is not None

    def test_filter_by_category(self):
        automation = get_email_templates("automation")
        assert automation
        assert all(t.category == "automation" for t in automation)

    def test_unknown_category_is_empty(self):
        assert get_email_templates("newsletter") == []


class TestRenderTemplate:

    def test_interview_invitation_scenario(self):
        rendered = render_template("interview_invitation", {
            "candidateName": "John",
            "jobTitle": "Software Engineer",
            "companyName": "Acme",
        })

        assert rendered.subject == "Interview Invitation - Software Engineer at Acme"
        assert rendered.body.startswith("Dear John,")
        # unbound placeholders stay verbatim
        assert "{{interviewDate}}" in rendered.body
        assert "{{confirmLink}}" in rendered.body

    def test_every_occurrence_is_replaced(self):
        rendered = render_template("rejection", {
            "candidateName": "Ana",
            "jobTitle": "Designer",
            "companyName": "Globex",
        })
        assert "{{" not in rendered.subject + rendered.body
        assert rendered.body.count("Globex") == 2

    def test_unknown_template_returns_none(self):
        assert render_template("does_not_exist", {"candidateName": "x"}) is None

    def test_none_values_count_as_unbound(self):
        rendered = render_template("screening_follow_up", {"candidateName": None, "companyName": "Acme"})
        assert "{{candidateName}}" in rendered.body
        assert "Acme" in rendered.subject

    def test_extra_variables_are_ignored(self):
        rendered = render_template("screening_follow_up", {
            "candidateName": "Lee",
            "companyName": "Acme",
            "unused": "value",
        })
        assert "value" not in rendered.body

    def test_values_are_stringified(self):
        rendered = render_template("auto_rejection", {"candidateName": "Lee", "companyName": "Acme", "daysInactive": 30})
        assert "for 30 days" in rendered.body

    def test_rendering_does_not_modify_catalog(self):
        before = get_email_template("job_offer").body
        render_template("job_offer", {"candidateName": "Kim"})
        assert get_email_template("job_offer").body == before


class TestMissingVariables:

    def test_lists_unbound_in_declared_order(self):
        missing = missing_variables("job_offer", {"candidateName": "Kim", "companyName": "Acme"})
        assert missing == ["jobTitle", "salary", "startDate", "offerExpiryDate"]

    def test_unknown_template_has_nothing_missing(self):
        assert missing_variables("nope", {}) == []
