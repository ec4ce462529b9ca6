"""Tests for correlation ID generation and context management."""

import asyncio
import re

import pytest

from core.correlation import (
    correlation_id_var,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestGenerateCorrelationId:
    """Tests for generate_correlation_id function."""

    def test_short_lowercase_hex(self) -> None:
        """IDs are 8 lowercase hex characters, short enough to read out."""
        for _ in range(100):
            assert re.match(r"^[0-9a-f]{8}$", generate_correlation_id())

    def test_unique(self) -> None:
        assert len({generate_correlation_id() for _ in range(1000)}) == 1000


class TestCorrelationIdContext:
    """Tests for get/set on the context variable."""

    def test_set_then_get(self) -> None:
        set_correlation_id("abc12345")
        assert get_correlation_id() == "abc12345"

    def test_empty_by_default(self) -> None:
        correlation_id_var.set("")
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_tasks_do_not_leak_into_each_other(self) -> None:
        """Each asyncio task works on a copy of the context."""
        set_correlation_id("parent00")

        async def child(value: str) -> str:
            set_correlation_id(value)
            await asyncio.sleep(0)
            return get_correlation_id()

        results = await asyncio.gather(child("child001"), child("child002"))

        assert results == ["child001", "child002"]
        assert get_correlation_id() == "parent00"


class TestCorrelationScope:
    """Tests for the correlation_scope context manager."""

    def test_binds_and_restores(self) -> None:
        set_correlation_id("outer123")

        with correlation_scope("inner456") as bound:
            assert bound == "inner456"
            assert get_correlation_id() == "inner456"

        assert get_correlation_id() == "outer123"

    def test_generates_id_when_omitted(self) -> None:
        with correlation_scope() as bound:
            assert re.match(r"^[0-9a-f]{8}$", bound)
            assert get_correlation_id() == bound

    def test_restores_after_exception(self) -> None:
        set_correlation_id("")

        with pytest.raises(RuntimeError):
            with correlation_scope("failing1"):
                raise RuntimeError("boom")

        assert get_correlation_id() == ""
