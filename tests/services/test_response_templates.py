from datetime import date
from decimal import Decimal

from app.schemas.enquiry import HydratedEnquiry, PartyRead, ResponseDecision, UserRead
from app.services.enquiry_lifecycle import response_templates
from tests.utils.enquiry import create_message_template, create_random_supplier


def _enquiry(**party_fields):
    party = PartyRead(
        id="pty_1",
        child_name="Emma",
        theme="pirates",
        party_date=date(2026, 12, 5),
        user=UserRead(id="usr_1", first_name="Sarah"),
        **party_fields,
    )
    return HydratedEnquiry(
        id="enq_1",
        supplier_id="sup_1",
        party_id="pty_1",
        status="pending",
        payment_status="paid",
        party=party,
    )


def test_build_context_formats_date_and_price():
    context = response_templates.build_context(_enquiry(), Decimal("95"))

    assert context == {
        "customer_name": "Sarah",
        "child_name": "Emma",
        "party_theme": "pirates",
        "party_date": "05 December 2026",
        "final_price": "95.00",
    }


def test_render_skips_templates_with_unknown_placeholders():
    assert response_templates.render("Hi {customer_name}", {"customer_name": "Sarah"}) == "Hi Sarah"
    assert response_templates.render("Hi {nickname}", {"customer_name": "Sarah"}) is None
    assert response_templates.render("Hi {customer_name", {"customer_name": "Sarah"}) is None


def test_render_skips_templates_that_cannot_be_formatted():
    context = {"customer_name": "Sarah", "final_price": "95.00"}

    assert response_templates.render("Thanks {}!", context) is None
    assert response_templates.render("Thanks {0}!", context) is None
    assert response_templates.render("Price {final_price:d}", context) is None
    assert response_templates.render("Hi {customer_name!z}", context) is None


def test_broken_custom_template_falls_through_to_next(db):
    supplier = create_random_supplier(db)
    create_message_template(db, "Thanks {}!", template_type="decline", supplier_id=supplier.id)
    create_message_template(db, "Sorry {customer_name}", template_type="decline")

    message = response_templates.resolve_default_message(
        db,
        supplier_id=supplier.id,
        supplier_category="entertainment",
        decision=ResponseDecision.DECLINED,
        context={"customer_name": "Sarah"},
    )

    assert message == "Sorry Sarah"


def test_custom_template_wins_over_system(db):
    supplier = create_random_supplier(db)
    create_message_template(db, "System says hi {customer_name}")
    create_message_template(db, "Custom hi {customer_name}", supplier_id=supplier.id)

    message = response_templates.resolve_default_message(
        db,
        supplier_id=supplier.id,
        supplier_category="entertainment",
        decision=ResponseDecision.ACCEPTED,
        context={"customer_name": "Sarah"},
    )

    assert message == "Custom hi Sarah"


def test_system_template_used_without_custom(db):
    supplier = create_random_supplier(db)
    create_message_template(db, "Sorry {customer_name}", template_type="decline")

    message = response_templates.resolve_default_message(
        db,
        supplier_id=supplier.id,
        supplier_category="entertainment",
        decision=ResponseDecision.DECLINED,
        context={"customer_name": "Sarah"},
    )

    assert message == "Sorry Sarah"


def test_unknown_category_falls_back_to_entertainment(db):
    context = response_templates.build_context(_enquiry())

    message = response_templates.resolve_default_message(
        db,
        supplier_id="sup_1",
        supplier_category="face_painting",
        decision=ResponseDecision.DECLINED,
        context=context,
    )

    assert message.startswith("Hi Sarah, thank you for your enquiry for Emma's party.")


def test_nothing_renders_without_party_details(db):
    message = response_templates.resolve_default_message(
        db,
        supplier_id="sup_1",
        supplier_category="catering",
        decision=ResponseDecision.ACCEPTED,
        context={},
    )

    assert message is None
