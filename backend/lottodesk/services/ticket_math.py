# Overview: Pure ticket arithmetic for one box on one day.

"""
Tickets are numbered from 0, so a roll of N tickets runs 0..N-1.

- No new roll that day:   sold = close - open
- New roll loaded (start S): sold = S + open - close

An absent reading (None) counts as 0 here, but callers must keep it as None
in storage. Negative results are returned as-is: they signal a data-entry
mistake and are left for an operator to correct.
"""

from __future__ import annotations

from typing import NamedTuple


class TicketSale(NamedTuple):
    sold_count: int
    sold_amount_cents: int


def _value(reading: int | None) -> int:
    return 0 if reading is None else reading


def compute_sold_count(
    open_number: int | None,
    close_number: int | None,
    new_box_start_number: int | None = None,
) -> int:
    open_value = _value(open_number)
    close_value = _value(close_number)

    if new_box_start_number is not None:
        return new_box_start_number + open_value - close_value
    return close_value - open_value


def compute_sold_amount_cents(sold_count: int, ticket_value_cents: int) -> int:
    return sold_count * ticket_value_cents


def compute_ticket_sale(
    open_number: int | None,
    close_number: int | None,
    new_box_start_number: int | None,
    ticket_value_cents: int,
) -> TicketSale:
    sold = compute_sold_count(open_number, close_number, new_box_start_number)
    return TicketSale(sold, compute_sold_amount_cents(sold, ticket_value_cents))
