import pytest

from hawker_hero.forms import optional_decimal, safe_target
from hawker_hero.listing import parse_page
from hawker_hero.models import Stall, db
from hawker_hero.services import hawker_centers, stalls


@pytest.mark.parametrize("raw, expected", [(None, 1), ("", 1), ("abc", 1), ("0", 1), ("-3", 1), ("2", 2)])
def test_parse_page(raw, expected):
    assert parse_page(raw) == expected


@pytest.mark.parametrize("raw, expected", [("4.50", "4.50"), ("4,5", "4.5"), ("", None), ("inf", None), ("x", None)])
def test_optional_decimal(raw, expected):
    value = optional_decimal(raw)
    assert (str(value) if value is not None else None) == expected


@pytest.mark.parametrize("target, expected", [
    ("/stalls?page=2", "/stalls?page=2"),
    (None, "/fallback"),
    ("//evil.example.com", "/fallback"),
    ("/\\evil.example.com", "/fallback"),
    ("javascript:alert(1)", "/fallback"),
    ("http://localhost/stalls", "/fallback"),
])
def test_safe_target(target, expected):
    assert safe_target(target, "/fallback") == expected


def test_empty_listing_has_no_pages(app):
    with app.app_context():
        page = hawker_centers.list_centers()
    assert (page.rows, page.total, page.total_pages) == ([], 0, 0)
    assert not page.has_prev and not page.has_next


def test_pages_are_stable_and_sized(app):
    with app.app_context():
        db.session.add_all(
            [Stall(name=f"Stall {n:02d}", location="Bedok", cuisine="Malay") for n in range(25)]
        )
        db.session.commit()
        first = stalls.list_stalls(page=1)
        third = stalls.list_stalls(page=3)
    assert (first.total, first.total_pages, len(first.rows)) == (25, 3, 12)
    assert [s.name for s in third.rows] == ["Stall 24"]
    assert first.has_next and not first.has_prev
    assert third.has_prev and not third.has_next


def test_page_query_parameter(client, app):
    with app.app_context():
        db.session.add_all([Stall(name=f"Stall {n:02d}", location="Bedok", cuisine="Malay") for n in range(13)])
        db.session.commit()
    page = client.get("/stalls?page=2").get_data(as_text=True)
    assert "Stall 12" in page
    assert "Stall 00" not in page
    assert "Page 2 of 2" in page
    assert "Page 1 of 2" in client.get("/stalls?page=zero").get_data(as_text=True)
