"""Tests for prco.core.result module."""

import pytest

from prco.core.result import Err, Ok, Result


class TestResult:
    def test_ok_frozen(self) -> None:
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]

    def test_variants_compare_by_value(self) -> None:
        assert Ok(1) == Ok(1)
        assert Err("x") != Ok("x")

    def test_repr(self) -> None:
        assert repr(Ok(1)) == "Ok(1)"
        assert repr(Err("bad")) == "Err('bad')"

    def test_pattern_matching(self) -> None:
        result: Result[int, str] = Err("bad")
        match result:
            case Ok(value):
                pytest.fail(f"unexpected Ok({value})")
            case Err(error):
                assert error == "bad"
