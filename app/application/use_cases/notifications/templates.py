"""Canned notification templates and placeholder substitution."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from app.domain.entities import (
    NOTIFICATION_TYPE_CUSTOMER_INFO,
    NOTIFICATION_TYPE_EMPLOYEE_GUIDE,
    NOTIFICATION_TYPE_GENERAL,
    NOTIFICATION_TYPE_SUBSCRIPTION,
    ROLE_CUSTOMER,
    ROLE_EMPLOYEE,
    ROLE_MANAGER,
    ROLE_OWNER,
    AppliedTemplate,
    NotificationTemplate,
)

_DEBT_NOTICE = (
    "بەڕێز کڕیار، کۆی قەرزت لە {market} بریتییە لە {amount} دینار. "
    "تکایە لە کاتی خۆیدا پارە بدەرەوە."
)

DEFAULT_TEMPLATES: tuple[NotificationTemplate, ...] = (
    NotificationTemplate(
        id="1",
        type=NOTIFICATION_TYPE_SUBSCRIPTION,
        sender_role=ROLE_OWNER,
        recipient_role=ROLE_MANAGER,
        title="ئاگاداری مۆڵەت",
        message=(
            "بەڕێز بەڕێوەبەر، مۆڵەتی مارکێتەکەت لە ڕۆژی {date} بەسەردەچێت. "
            "تکایە بۆ درێژکردنەوە پەیوەندی بکە."
        ),
    ),
    NotificationTemplate(
        id="2",
        type=NOTIFICATION_TYPE_SUBSCRIPTION,
        sender_role=ROLE_OWNER,
        recipient_role=ROLE_MANAGER,
        title="نوێکردنەوەی مۆڵەت",
        message=(
            "بەڕێز بەڕێوەبەر، مۆڵەتی مارکێتەکەت درێژکرایەوە بۆ {days} ڕۆژ. "
            "کۆتا بەروار: {date}"
        ),
    ),
    NotificationTemplate(
        id="3",
        type=NOTIFICATION_TYPE_EMPLOYEE_GUIDE,
        sender_role=ROLE_MANAGER,
        recipient_role=ROLE_EMPLOYEE,
        title="ڕێنمایی بەڕێوەبردنی کڕیاران",
        message=(
            "بەڕێز کارمەند، تکایە لە تۆمارکردنی کڕیاران ورد بە. هەموو زانیاریەکان "
            "بە وردی بنووسە و دڵنیابە لە ووردی ژمارەکان."
        ),
    ),
    NotificationTemplate(
        id="4",
        type=NOTIFICATION_TYPE_EMPLOYEE_GUIDE,
        sender_role=ROLE_MANAGER,
        recipient_role=ROLE_EMPLOYEE,
        title="گەیاندنی پەیام",
        message="بەڕێز کارمەند، {message}",
    ),
    NotificationTemplate(
        id="5",
        type=NOTIFICATION_TYPE_CUSTOMER_INFO,
        sender_role=ROLE_MANAGER,
        recipient_role=ROLE_CUSTOMER,
        title="ئاگاداری قەرز",
        message=_DEBT_NOTICE,
    ),
    NotificationTemplate(
        id="6",
        type=NOTIFICATION_TYPE_CUSTOMER_INFO,
        sender_role=ROLE_EMPLOYEE,
        recipient_role=ROLE_CUSTOMER,
        title="ئاگاداری قەرز",
        message=_DEBT_NOTICE,
    ),
    NotificationTemplate(
        id="7",
        type=NOTIFICATION_TYPE_CUSTOMER_INFO,
        sender_role=ROLE_MANAGER,
        recipient_role=ROLE_CUSTOMER,
        title="پەیامی تایبەت",
        message="بەڕێز کڕیار، {message}",
    ),
    NotificationTemplate(
        id="8",
        type=NOTIFICATION_TYPE_CUSTOMER_INFO,
        sender_role=ROLE_EMPLOYEE,
        recipient_role=ROLE_CUSTOMER,
        title="پەیامی تایبەت",
        message="بەڕێز کڕیار، {message}",
    ),
    NotificationTemplate(
        id="9",
        type=NOTIFICATION_TYPE_GENERAL,
        sender_role=ROLE_MANAGER,
        recipient_role=ROLE_EMPLOYEE,
        title="ئاگادارکردنەوە",
        message="{message}",
    ),
    NotificationTemplate(
        id="10",
        type=NOTIFICATION_TYPE_GENERAL,
        sender_role=ROLE_MANAGER,
        recipient_role=ROLE_CUSTOMER,
        title="ئاگادارکردنەوە",
        message="{message}",
    ),
)


def substitute_placeholders(text: str, variables: Mapping[str, object]) -> str:
    """Replace every ``{key}`` occurrence for each entry of ``variables``.

    Tokens whose key is missing from ``variables`` are left untouched and
    substituted values are never re-scanned.
    """

    if not variables:
        return text
    tokens = {"{" + str(key) + "}": str(value) for key, value in variables.items()}
    pattern = re.compile(
        "|".join(re.escape(token) for token in sorted(tokens, key=len, reverse=True))
    )
    return pattern.sub(lambda match: tokens[match.group(0)], text)


def apply_template(
    template: NotificationTemplate, variables: Mapping[str, object]
) -> AppliedTemplate:
    """Resolve ``template`` into a sendable title/message pair."""

    return AppliedTemplate(
        title=substitute_placeholders(template.title, variables),
        message=substitute_placeholders(template.message, variables),
        type=template.type,
    )


def filter_templates(
    templates: Iterable[NotificationTemplate],
    sender_role: str,
    recipient_role: str | None = None,
) -> list[NotificationTemplate]:
    """Return templates usable by ``sender_role``, optionally for one recipient role."""

    return [
        template
        for template in templates
        if template.sender_role == sender_role
        and (not recipient_role or template.recipient_role == recipient_role)
    ]


__all__ = [
    "DEFAULT_TEMPLATES",
    "apply_template",
    "filter_templates",
    "substitute_placeholders",
]
