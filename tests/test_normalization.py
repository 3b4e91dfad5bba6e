from __future__ import annotations

import pytest

from pyonecta._normalize import safe_float, safe_int


class TestSafeFloat:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30", 30.0),
            (" 1.5 ", 1.5),
            (7, 7.0),
            (["120", "60"], 120.0),
        ],
    )
    def test_parses(self, value: object, expected: float) -> None:
        assert safe_float(value) == expected

    @pytest.mark.parametrize("value", [None, "", "soon", "nan", "inf", [], {"value": 1}])
    def test_rejects(self, value: object) -> None:
        assert safe_float(value) is None


def test_safe_int_truncates() -> None:
    assert safe_int("19") == 19
    assert safe_int("19.9") == 19
    assert safe_int("garbage") is None
