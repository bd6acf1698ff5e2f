from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.services.enquiry_lifecycle.reconciler import EnquiryReconciler
from tests.utils.enquiry import (
    create_random_enquiry,
    create_random_party,
    create_random_supplier,
    create_random_user,
    hours_ago,
)


def _timeout_error():
    return OperationalError("SELECT", {}, Exception("canceling statement due to statement timeout"))


def test_list_hydrates_party_and_user_in_three_queries(db, query_counter):
    supplier = create_random_supplier(db)
    for i in range(5):
        user = create_random_user(db, first_name=f"Parent{i}")
        party = create_random_party(db, user_id=user.id, child_name=f"Child{i}")
        create_random_enquiry(db, supplier.id, party.id)

    query_counter.clear()
    enquiries = EnquiryReconciler().list_for_suppliers(db, [supplier.id])

    assert len(enquiries) == 5
    assert len(query_counter) <= 3
    for enquiry in enquiries:
        assert enquiry.party is not None
        assert enquiry.party.user is not None
        assert enquiry.party.user.first_name.startswith("Parent")


def test_only_paid_enquiries_are_listed(db):
    supplier = create_random_supplier(db)
    party = create_random_party(db)
    paid = create_random_enquiry(db, supplier.id, party.id, payment_status="paid")
    create_random_enquiry(db, supplier.id, party.id, payment_status="unpaid")

    enquiries = EnquiryReconciler().list_for_suppliers(db, [supplier.id])

    assert [e.id for e in enquiries] == [paid.id]


def test_newest_first_and_status_filter(db):
    supplier = create_random_supplier(db)
    party = create_random_party(db)
    older = create_random_enquiry(db, supplier.id, party.id, created_at=hours_ago(5))
    newer = create_random_enquiry(db, supplier.id, party.id, created_at=hours_ago(1))
    create_random_enquiry(db, supplier.id, party.id, status="declined")

    reconciler = EnquiryReconciler()
    pending = reconciler.list_for_suppliers(db, [supplier.id], "pending")

    assert [e.id for e in pending] == [newer.id, older.id]


def test_missing_party_yields_none_without_failing_batch(db):
    supplier = create_random_supplier(db)
    user = create_random_user(db)
    party = create_random_party(db, user_id=user.id)
    good = create_random_enquiry(db, supplier.id, party.id, created_at=hours_ago(2))
    orphan = create_random_enquiry(db, supplier.id, "pty_deleted", created_at=hours_ago(1))

    result = EnquiryReconciler().hydrate_with_report(db, [good, orphan])

    by_id = {e.id: e for e in result.enquiries}
    assert by_id[orphan.id].party is None
    assert by_id[good.id].party.id == party.id
    assert result.unresolved_party_ids == {"pty_deleted"}
    assert not result.complete


def test_party_without_user_has_no_customer(db):
    supplier = create_random_supplier(db)
    party = create_random_party(db, user_id="usr_gone")
    enquiry = create_random_enquiry(db, supplier.id, party.id)

    result = EnquiryReconciler().hydrate_with_report(db, [enquiry])

    assert result.enquiries[0].party is not None
    assert result.enquiries[0].party.user is None
    assert result.unresolved_user_ids == {"usr_gone"}


def test_failed_party_fetch_degrades_to_none(db):
    supplier = create_random_supplier(db)
    party = create_random_party(db)
    create_random_enquiry(db, supplier.id, party.id)

    with patch(
        "app.services.enquiry_lifecycle.reconciler.crud_party.read_parties",
        side_effect=_timeout_error(),
    ):
        enquiries = EnquiryReconciler(query_timeout_ms=50).list_for_suppliers(db, [supplier.id])

    assert len(enquiries) == 1
    assert enquiries[0].party is None


def test_failed_primary_read_propagates(db):
    with patch(
        "app.services.enquiry_lifecycle.reconciler.crud_enquiry.read_enquiries",
        side_effect=_timeout_error(),
    ):
        with pytest.raises(OperationalError):
            EnquiryReconciler().list_for_suppliers(db, ["sup_any"])


def test_no_suppliers_means_no_queries(db, query_counter):
    query_counter.clear()
    assert EnquiryReconciler().list_for_suppliers(db, []) == []
    assert query_counter == []


def test_hydration_is_read_only(db):
    supplier = create_random_supplier(db)
    party = create_random_party(db)
    enquiry = create_random_enquiry(db, supplier.id, party.id)

    reconciler = EnquiryReconciler()
    reconciler.list_for_suppliers(db, [supplier.id])
    reconciler.list_for_suppliers(db, [supplier.id])

    db.refresh(enquiry)
    assert enquiry.status == "pending"
    assert enquiry.version == 1
