from datetime import datetime, timedelta, timezone

import pytest

from factories import investment
from smb_bookkeeping.depreciation import age_in_years, book_value, book_values

ACQUIRED = datetime(2020, 1, 1, tzinfo=timezone.utc)


def test_book_value_at_end_of_lifespan_is_residual() -> None:
    """Exactly one lifespan after acquisition the residual value remains."""
    inv = investment("2020-01-01", 1000.0, residual_value=100.0, lifespan_years=5)
    now = ACQUIRED + timedelta(days=1826.25)

    assert age_in_years(inv, now) == pytest.approx(5.0)
    assert book_value(inv, now) == 100.0


def test_book_value_after_lifespan_stays_residual() -> None:
    inv = investment("2020-01-01", 1000.0, residual_value=100.0, lifespan_years=5)
    now = ACQUIRED + timedelta(days=3652.5)

    assert book_value(inv, now) == 100.0


def test_book_value_half_way() -> None:
    """Straight-line depreciation: 180 per year over 2.5 years."""
    inv = investment("2020-01-01", 1000.0, residual_value=100.0, lifespan_years=5)
    now = ACQUIRED + timedelta(days=913.125)

    assert book_value(inv, now) == pytest.approx(550.0)


def test_book_value_on_acquisition_day() -> None:
    inv = investment("2020-01-01", 1000.0, residual_value=100.0, lifespan_years=5)

    assert book_value(inv, ACQUIRED) == pytest.approx(1000.0)


def test_book_value_future_acquisition_is_clamped() -> None:
    """A future acquisition date still yields at least the residual value."""
    inv = investment("2030-01-01", 1000.0, residual_value=100.0, lifespan_years=5)

    value = book_value(inv, ACQUIRED)

    assert age_in_years(inv, ACQUIRED) < 0
    assert value >= inv.residual_value


def test_book_value_is_never_below_residual() -> None:
    inv = investment("2020-01-01", 5000.0, residual_value=500.0, lifespan_years=3)

    for days in (0, 100, 500, 1000, 1095, 2000):
        assert book_value(inv, ACQUIRED + timedelta(days=days)) >= 500.0


def test_naive_reference_is_taken_as_utc() -> None:
    inv = investment("2020-01-01", 1000.0, residual_value=100.0, lifespan_years=5)
    naive = datetime(2022, 7, 2, 3, 0)

    assert book_value(inv, naive) == pytest.approx(
        book_value(inv, naive.replace(tzinfo=timezone.utc))
    )


def test_book_values_pairs_each_investment() -> None:
    investments = [
        investment("2020-01-01", 1000.0, residual_value=100.0, lifespan_years=5),
        investment("2015-06-01", 800.0, residual_value=0.0, lifespan_years=4),
    ]
    now = ACQUIRED + timedelta(days=913.125)

    pairs = book_values(investments, now)

    assert [inv for inv, _ in pairs] == investments
    assert pairs[0][1] == pytest.approx(550.0)
    assert pairs[1][1] == 0.0
    assert book_values(None, now) == []
