"""Tests for template filtering and placeholder substitution."""

import pytest

from app.application.use_cases.notifications import (
    DEFAULT_TEMPLATES,
    apply_template,
    filter_templates,
    substitute_placeholders,
)
from app.domain.entities import ROLE_CUSTOMER, ROLE_EMPLOYEE, ROLE_MANAGER, ROLE_OWNER


def _template(template_id: str):
    return next(template for template in DEFAULT_TEMPLATES if template.id == template_id)


def test_debt_notice_is_filled_with_market_and_amount():
    """The customer debt notice must contain the market and formatted amount."""

    applied = apply_template(_template("5"), {"market": "مارکێتی ئازاد", "amount": "50,000"})

    assert "مارکێتی ئازاد" in applied.message
    assert "50,000" in applied.message
    assert "{market}" not in applied.message
    assert "{amount}" not in applied.message
    assert applied.title == "ئاگاداری قەرز"
    assert applied.type == "customer_info"


def test_unknown_placeholders_are_left_verbatim():
    result = substitute_placeholders("Hello {name}, you owe {amount}", {"name": "Sara"})

    assert result == "Hello Sara, you owe {amount}"


def test_every_occurrence_is_replaced_without_rescanning_values():
    result = substitute_placeholders("{a}-{a}-{b}", {"a": "{b}", "b": "x"})

    assert result == "{b}-{b}-x"


def test_empty_variables_return_text_unchanged():
    assert substitute_placeholders("{message}", {}) == "{message}"


@pytest.mark.parametrize(
    ("sender_role", "recipient_role", "expected_ids"),
    [
        (ROLE_OWNER, None, ["1", "2"]),
        (ROLE_MANAGER, ROLE_EMPLOYEE, ["3", "4", "9"]),
        (ROLE_MANAGER, ROLE_CUSTOMER, ["5", "7", "10"]),
        (ROLE_EMPLOYEE, None, ["6", "8"]),
        (ROLE_CUSTOMER, None, []),
    ],
)
def test_filter_templates_by_roles(sender_role, recipient_role, expected_ids):
    templates = filter_templates(DEFAULT_TEMPLATES, sender_role, recipient_role)

    assert [template.id for template in templates] == expected_ids


def test_default_templates_have_unique_ids():
    ids = [template.id for template in DEFAULT_TEMPLATES]

    assert len(ids) == len(set(ids)) == 10
