from __future__ import annotations

import pytest

from src.common.text import parse_price, slugify


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Mustang GT500", "mustang-gt500"),
        ("  Spitfire   Mk IX ", "-spitfire-mk-ix-"),
        ("Café Racer!", "caf-racer"),
        ("already-a-slug", "already-a-slug"),
        ("", ""),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    assert slugify(text) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 0.0),
        ("", 0.0),
        ("  ", 0.0),
        ("499", 499.0),
        ("12.5", 12.5),
        ("abc", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        ("-3", -3.0),
    ],
)
def test_parse_price(raw, expected) -> None:
    assert parse_price(raw) == expected
