from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from fileguard.errors import BusinessRuleViolation, ErrorCode
from fileguard.services.extension_policy import (
    MAX_CUSTOM_EXTENSIONS,
    MAX_FIXED_EXTENSIONS,
)
from fileguard.services.seed_defaults import DEFAULT_FIXED_EXTENSIONS


async def _expect_violation(code, coro):
    with pytest.raises(BusinessRuleViolation) as exc_info:
        await coro
    assert exc_info.value.code == code
    return exc_info.value


class TestFixedExtensions:
    async def test_add_normalizes_and_blocks_by_default(self, policy):
        record = await policy.add_fixed_extension(" EXE ", "Windows executable")
        assert record.extension == "exe"
        assert record.is_blocked is True
        assert record.description == "Windows executable"

    async def test_add_unblocked_when_requested(self, policy):
        record = await policy.add_fixed_extension("bat", is_blocked=False)
        assert record.is_blocked is False
        assert await policy.is_extension_blocked("bat") is False

    async def test_add_invalid(self, policy):
        await _expect_violation(ErrorCode.INVALID_EXTENSION, policy.add_fixed_extension("pdf.exe"))
        await _expect_violation(ErrorCode.INVALID_EXTENSION, policy.add_fixed_extension(None))
        await _expect_violation(ErrorCode.INVALID_EXTENSION, policy.add_fixed_extension("   "))

    async def test_capacity(self, policy):
        for i in range(MAX_FIXED_EXTENSIONS):
            await policy.add_fixed_extension(f"ext{i}")

        err = await _expect_violation(ErrorCode.CAPACITY_EXCEEDED, policy.add_fixed_extension("one"))
        assert err.status_code == 400
        assert len(await policy.get_all_fixed_extensions()) == MAX_FIXED_EXTENSIONS

    async def test_capacity_checked_before_duplicates(self, policy):
        for i in range(MAX_FIXED_EXTENSIONS):
            await policy.add_fixed_extension(f"ext{i}")
        await _expect_violation(ErrorCode.CAPACITY_EXCEEDED, policy.add_fixed_extension("ext0"))

    async def test_duplicate_in_fixed(self, policy):
        await policy.add_fixed_extension("exe")
        err = await _expect_violation(ErrorCode.DUPLICATE_IN_FIXED, policy.add_fixed_extension("EXE"))
        assert err.status_code == 409
        assert err.extension == "exe"

    async def test_duplicate_in_custom(self, policy):
        await policy.add_custom_extension("zip")
        await _expect_violation(ErrorCode.DUPLICATE_IN_CUSTOM, policy.add_fixed_extension("zip"))

    async def test_concurrent_insert_maps_to_duplicate(self, policy, monkeypatch):
        await policy.add_fixed_extension("exe")
        # Another request inserted "exe" between the lookup and the commit
        monkeypatch.setattr(policy.fixed_store, "exists_by_key", AsyncMock(return_value=False))

        err = await _expect_violation(ErrorCode.DUPLICATE_IN_FIXED, policy.add_fixed_extension("exe"))
        assert err.status_code == 409
        assert isinstance(err.__cause__, IntegrityError)
        assert len(await policy.get_all_fixed_extensions()) == 1

    async def test_update_status(self, policy):
        await policy.add_fixed_extension("exe", is_blocked=False)
        record = await policy.update_fixed_extension_status("EXE", True)
        assert record.is_blocked is True
        assert await policy.is_extension_blocked("exe") is True

        await policy.update_fixed_extension_status("exe", False)
        assert await policy.is_extension_blocked("exe") is False

    async def test_update_status_not_found(self, policy):
        err = await _expect_violation(ErrorCode.NOT_FOUND, policy.update_fixed_extension_status("exe", True))
        assert err.status_code == 404

    async def test_list_is_alphabetical(self, policy):
        for ext in ["scr", "bat", "exe"]:
            await policy.add_fixed_extension(ext)
        assert [r.extension for r in await policy.get_all_fixed_extensions()] == ["bat", "exe", "scr"]

    async def test_delete_by_id(self, policy):
        record = await policy.add_fixed_extension("exe")
        await policy.delete_fixed_extension(record.id)
        assert await policy.get_extension_type("exe") == "none"
        await _expect_violation(ErrorCode.NOT_FOUND, policy.delete_fixed_extension(record.id))

    async def test_reset_restores_defaults_unblocked(self, policy):
        await policy.add_fixed_extension("iso")
        await policy.add_fixed_extension("exe", is_blocked=True)

        records = await policy.reset_fixed_extensions()

        expected = sorted(e["extension"] for e in DEFAULT_FIXED_EXTENSIONS)
        assert [r.extension for r in records] == expected
        assert all(r.is_blocked is False for r in records)
        assert await policy.get_extension_type("iso") == "none"

    async def test_reset_skips_defaults_on_custom_list(self, policy):
        await policy.add_custom_extension("js")

        records = await policy.reset_fixed_extensions()

        assert "js" not in [r.extension for r in records]
        assert await policy.get_extension_type("js") == "custom"
        assert await policy.is_extension_blocked("js") is True


class TestCustomExtensions:
    async def test_add_is_always_blocked(self, policy):
        record = await policy.add_custom_extension("ZIP")
        assert record.extension == "zip"
        assert record.is_blocked is True
        assert await policy.is_extension_blocked("zip") is True

    async def test_add_invalid(self, policy):
        await _expect_violation(ErrorCode.INVALID_EXTENSION, policy.add_custom_extension("exe_txt"))
        await _expect_violation(ErrorCode.INVALID_EXTENSION, policy.add_custom_extension("a" * 21))

    async def test_duplicate_in_fixed(self, policy):
        await policy.add_fixed_extension("exe")
        await _expect_violation(ErrorCode.DUPLICATE_IN_FIXED, policy.add_custom_extension("exe"))

    async def test_duplicate_in_custom(self, policy):
        await policy.add_custom_extension("zip")
        await _expect_violation(ErrorCode.DUPLICATE_IN_CUSTOM, policy.add_custom_extension(" Zip"))
        assert len(await policy.get_all_custom_extensions()) == 1

    async def test_concurrent_insert_maps_to_duplicate(self, policy, monkeypatch):
        await policy.add_custom_extension("zip")
        monkeypatch.setattr(policy.custom_store, "exists_by_key", AsyncMock(return_value=False))

        err = await _expect_violation(ErrorCode.DUPLICATE_IN_CUSTOM, policy.add_custom_extension("zip"))
        assert err.status_code == 409
        assert isinstance(err.__cause__, IntegrityError)
        assert len(await policy.get_all_custom_extensions()) == 1

    async def test_capacity(self, policy):
        for i in range(MAX_CUSTOM_EXTENSIONS):
            await policy.add_custom_extension(f"c{i}")

        await _expect_violation(ErrorCode.CAPACITY_EXCEEDED, policy.add_custom_extension("extra"))
        assert len(await policy.get_all_custom_extensions()) == MAX_CUSTOM_EXTENSIONS

    async def test_list_in_creation_order(self, policy):
        for ext in ["zip", "apk", "msi"]:
            await policy.add_custom_extension(ext)
        assert [r.extension for r in await policy.get_all_custom_extensions()] == ["zip", "apk", "msi"]

    async def test_delete_by_id(self, policy):
        record = await policy.add_custom_extension("zip")
        await policy.delete_custom_extension(record.id)
        assert await policy.is_extension_blocked("zip") is False
        await _expect_violation(ErrorCode.NOT_FOUND, policy.delete_custom_extension(record.id))

    async def test_delete_by_name_unblocks(self, policy):
        await policy.add_custom_extension("zip")
        await policy.delete_custom_extension_by_name("ZIP")
        assert await policy.is_extension_blocked("zip") is False
        await _expect_violation(ErrorCode.NOT_FOUND, policy.delete_custom_extension_by_name("zip"))

    async def test_delete_all(self, policy):
        for ext in ["zip", "apk"]:
            await policy.add_custom_extension(ext)
        assert await policy.delete_all_custom_extensions() == 2
        assert await policy.get_all_custom_extensions() == []


class TestDecisions:
    async def test_unknown_extension_is_allowed(self, policy):
        assert await policy.is_extension_blocked("txt") is False

    async def test_empty_and_invalid_input_is_allowed(self, policy):
        assert await policy.is_extension_blocked(None) is False
        assert await policy.is_extension_blocked("") is False
        assert await policy.is_extension_blocked("pdf.exe") is False

    async def test_lookup_is_case_insensitive(self, policy):
        await policy.add_custom_extension("zip")
        assert await policy.is_extension_blocked("ZIP") is True

    async def test_extension_type(self, policy):
        await policy.add_fixed_extension("exe")
        await policy.add_custom_extension("zip")
        assert await policy.get_extension_type("EXE") == "fixed"
        assert await policy.get_extension_type("zip") == "custom"
        assert await policy.get_extension_type("txt") == "none"
        assert await policy.get_extension_type("") == "none"

    async def test_blocked_extensions_union(self, policy):
        await policy.add_fixed_extension("exe")
        await policy.add_fixed_extension("bat", is_blocked=False)
        await policy.add_custom_extension("zip")
        await policy.add_custom_extension("apk")
        assert await policy.get_blocked_extensions() == ["apk", "exe", "zip"]

    async def test_validate_extension_delegates(self, policy):
        assert policy.validate_extension("pdf") is True
        assert policy.validate_extension("p.df") is False
