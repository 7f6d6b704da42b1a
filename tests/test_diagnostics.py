"""Tests for StaffBoard diagnostics module.

Config entry diagnostics return the raw storage data plus a ledger audit.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names

from unittest.mock import MagicMock

from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.staffboard import const
from custom_components.staffboard.diagnostics import (
    async_get_config_entry_diagnostics,
    async_get_device_diagnostics,
)

from .conftest import ALICE_ID, ENTRY_ID


def _device(participant_id: str | None) -> DeviceEntry:
    device = MagicMock(spec=DeviceEntry)
    device.identifiers = (
        {(const.DOMAIN, participant_id)} if participant_id else {("other", "x")}
    )
    return device


async def test_config_entry_diagnostics_returns_raw_storage(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test diagnostics returns the storage data itself."""
    coordinator = init_integration.runtime_data

    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert result["storage"] is coordinator.store.data
    assert result["balance_audit"] == {}


async def test_config_entry_diagnostics_reports_drift(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test that drifted balances show up in the audit."""
    coordinator = init_integration.runtime_data
    coordinator.economy_manager.award(ALICE_ID, 10, "SOLVED", ENTRY_ID)
    coordinator.participants_data[ALICE_ID]["points"] = 7

    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert result["balance_audit"] == {ALICE_ID: {"cached": 7, "ledger": 10}}


async def test_device_diagnostics(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test per-participant diagnostics."""
    coordinator = init_integration.runtime_data
    coordinator.economy_manager.award(ALICE_ID, 2, "POST", ENTRY_ID)

    result = await async_get_device_diagnostics(
        hass, init_integration, _device(ALICE_ID)
    )

    assert result["participant_id"] == ALICE_ID
    assert result["participant_data"]["name"] == "Alice"
    assert result["ledger_balance"] == 2
    assert [row["amount"] for row in result["recent_ledger"]] == [2]


async def test_device_diagnostics_errors(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test the error results for unknown devices."""
    missing = await async_get_device_diagnostics(
        hass, init_integration, _device("participant-ghost")
    )
    assert "error" in missing

    foreign = await async_get_device_diagnostics(hass, init_integration, _device(None))
    assert "error" in foreign
