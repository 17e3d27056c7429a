from decimal import Decimal

import pytest

from scms.quotations.domain.entities import Quotation, QuotationItem
from scms.quotations.domain.exceptions import InvalidQuotationStatusException
from scms.quotations.domain.status import QuotationStatus, QuotationStatusMachine


@pytest.fixture
def quotation() -> Quotation:
    return Quotation(
        id=7,
        customer_id=1,
        items=[QuotationItem(product_id=1, quantity=2, unit_price=Decimal("100"), discount=Decimal("10"))],
    )


def test_approve_reject_approve_again(quotation):
    machine = QuotationStatusMachine()

    approved = machine.set_status(quotation, QuotationStatus.APPROVED)
    rejected = machine.set_status(approved, "Rejected")
    approved_again = machine.set_status(rejected, "Approved")

    assert approved.status == QuotationStatus.APPROVED
    assert rejected.status == QuotationStatus.REJECTED
    assert approved_again.status == QuotationStatus.APPROVED
    assert quotation.status == QuotationStatus.PENDING
    assert approved_again.total_amount == quotation.total_amount


def test_setting_same_status_is_a_no_op(quotation):
    assert QuotationStatusMachine().set_status(quotation, "Pending") is quotation


@pytest.mark.parametrize("current", list(QuotationStatus))
@pytest.mark.parametrize("target", list(QuotationStatus))
def test_every_transition_is_allowed(current, target):
    assert QuotationStatusMachine().can_transition(current, target)


@pytest.mark.parametrize("raw", ["APPROVED", "approved", " Approved "])
def test_parse_is_case_insensitive(raw):
    assert QuotationStatus.parse(raw) == QuotationStatus.APPROVED


def test_unknown_status_is_rejected(quotation):
    with pytest.raises(InvalidQuotationStatusException) as exc_info:
        QuotationStatusMachine().set_status(quotation, "Archived")
    assert "Pending" in exc_info.value.allowed
