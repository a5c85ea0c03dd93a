"""Ticket arithmetic: sold count and amount for one box on one day."""

import pytest

from lottodesk.services.ticket_math import compute_sold_count, compute_ticket_sale


@pytest.mark.parametrize(
    "open_number,close_number,new_box_start,expected",
    [
        (10, 25, None, 15),
        (0, 0, None, 0),
        (None, 12, None, 12),
        (12, None, None, -12),
        (None, None, None, 0),
        (0, 0, 50, 50),
        # Refilled with a roll starting at 0
        (10, 5, 0, 5),
        (0, 10, 5, -5),
        (40, 3, 50, 87),
    ],
)
def test_compute_sold_count(open_number, close_number, new_box_start, expected):
    assert compute_sold_count(open_number, close_number, new_box_start) == expected


def test_new_box_start_zero_is_not_absent():
    # A start of 0 still switches to the new-roll formula
    assert compute_sold_count(5, 3, 0) == 2
    assert compute_sold_count(5, 3, None) == -2


def test_compute_ticket_sale_amount():
    sale = compute_ticket_sale(10, 25, None, 200)
    assert sale.sold_count == 15
    assert sale.sold_amount_cents == 3000


def test_full_roll_sold():
    sale = compute_ticket_sale(0, 49, None, 200)
    assert sale == (49, 9800)


def test_negative_sale_is_returned_as_is():
    sale = compute_ticket_sale(30, 20, None, 500)
    assert sale.sold_count == -10
    assert sale.sold_amount_cents == -5000
