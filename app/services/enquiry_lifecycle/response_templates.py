# app/services/enquiry_lifecycle/response_templates.py
"""
Default reply text used when a supplier responds without writing a message.

Lookup order: the supplier's own template for its category, then the
category's system template, then a built-in fallback for the category.
Placeholders: {customer_name}, {child_name}, {party_theme}, {party_date},
{final_price}. A template whose placeholders can't all be filled is skipped
and the caller falls back to the plain default reply.
"""
import logging
from decimal import Decimal
from string import Formatter
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.crud import crud_message_template
from app.schemas.enquiry import HydratedEnquiry, ResponseDecision

logger = logging.getLogger(__name__)

TEMPLATE_TYPES = {
    ResponseDecision.ACCEPTED: "acceptance",
    ResponseDecision.DECLINED: "decline",
}

DEFAULT_CATEGORY = "entertainment"

FALLBACK_TEMPLATES = {
    "entertainment": {
        "acceptance": (
            "Hi {customer_name}! I'm thrilled to perform at {child_name}'s {party_theme} "
            "party on {party_date}. Looking forward to creating magical memories for £{final_price}!"
        ),
        "decline": (
            "Hi {customer_name}, thank you for your enquiry for {child_name}'s party. "
            "Unfortunately I'm already booked for {party_date}."
        ),
    },
    "catering": {
        "acceptance": (
            "Hi {customer_name}! I'm delighted to cater {child_name}'s {party_theme} party "
            "on {party_date}. All dietary requirements noted! Final price: £{final_price}"
        ),
        "decline": (
            "Hi {customer_name}, thank you for your catering enquiry for {child_name}'s party. "
            "Unfortunately I'm not available on {party_date}."
        ),
    },
    "venue": {
        "acceptance": (
            "Hi {customer_name}! Our venue is confirmed for {child_name}'s {party_theme} party "
            "on {party_date}. Final price: £{final_price}. I'll send details closer to the date."
        ),
        "decline": (
            "Hi {customer_name}, thank you for your venue enquiry for {child_name}'s party. "
            "Unfortunately we're already booked for {party_date}."
        ),
    },
}


def build_context(
    enquiry: HydratedEnquiry, final_price: Optional[Decimal] = None
) -> Dict[str, str]:
    """Placeholder values we actually know; unknown ones are simply left out."""
    context: Dict[str, str] = {}
    party = enquiry.party
    if party is not None:
        if party.user is not None and party.user.first_name:
            context["customer_name"] = party.user.first_name
        if party.child_name:
            context["child_name"] = party.child_name
        if party.theme:
            context["party_theme"] = party.theme
        if party.party_date:
            context["party_date"] = party.party_date.strftime("%d %B %Y")

    price = final_price if final_price is not None else enquiry.final_price
    if price is not None:
        context["final_price"] = f"{Decimal(str(price)):.2f}"
    return context


def render(template: str, context: Dict[str, str]) -> Optional[str]:
    """Fill a template, or return None if any placeholder has no value."""
    try:
        fields = {name for _, name, _, _ in Formatter().parse(template) if name is not None}
    except ValueError:
        logger.warning(f"Malformed response template skipped: {template!r}")
        return None

    # Only named placeholders can be filled from the context.
    if any(not name or name[0].isdigit() for name in fields):
        logger.warning(f"Response template with positional placeholder skipped: {template!r}")
        return None

    missing = fields - set(context)
    if missing:
        logger.debug(f"Template needs {sorted(missing)}; skipping")
        return None
    try:
        return template.format(**context)
    except (IndexError, KeyError, ValueError) as e:
        logger.warning(f"Response template could not be rendered ({e}); skipping: {template!r}")
        return None


def resolve_default_message(
    db: Session,
    *,
    supplier_id: str,
    supplier_category: Optional[str],
    decision: ResponseDecision,
    context: Dict[str, str],
) -> Optional[str]:
    template_type = TEMPLATE_TYPES[decision]
    category = supplier_category or DEFAULT_CATEGORY

    candidates = []
    custom = crud_message_template.get_custom(db, supplier_id, category, template_type)
    if custom:
        candidates.append(custom.message_template)
    system = crud_message_template.get_system(db, category, template_type)
    if system:
        candidates.append(system.message_template)
    fallback = FALLBACK_TEMPLATES.get(category, FALLBACK_TEMPLATES[DEFAULT_CATEGORY])
    candidates.append(fallback[template_type])

    for template in candidates:
        rendered = render(template, context)
        if rendered:
            return rendered
    return None
