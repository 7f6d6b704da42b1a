"""Shared fixtures for StaffBoard tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.staffboard.const import (
    CONF_BOARD_NAME,
    CONF_POINTS_ICON,
    CONF_POINTS_LABEL,
    DATA_ENTRIES,
    DATA_PARTICIPANTS,
    DEFAULT_POINTS_ICON,
    DEFAULT_POINTS_LABEL,
    DOMAIN,
)
from custom_components.staffboard.coordinator import StaffBoardCoordinator
from custom_components.staffboard.store import StaffBoardStore

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

ALICE_ID = "participant-alice"
BOB_ID = "participant-bob"
CAROL_ID = "participant-carol"
DAVE_ID = "participant-dave"
ENTRY_ID = "entry-monday-briefing"
ENTRY_DATE = "2024-06-03"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
async def mock_hass_users(hass: HomeAssistant) -> dict[str, Any]:
    """Create mock Home Assistant users for testing."""
    admin_user = await hass.auth.async_create_user(
        "Admin User",
        group_ids=["system-admin"],
    )
    alice_user = await hass.auth.async_create_user(
        "Alice",
        group_ids=["system-users"],
    )
    bob_user = await hass.auth.async_create_user(
        "Bob",
        group_ids=["system-users"],
    )
    stranger_user = await hass.auth.async_create_user(
        "Stranger",
        group_ids=["system-users"],
    )

    return {
        "admin": admin_user,
        "alice": alice_user,
        "bob": bob_user,
        "stranger": stranger_user,
    }


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Ward 3 Board",
        data={CONF_BOARD_NAME: "Ward 3 Board"},
        options={
            CONF_POINTS_LABEL: DEFAULT_POINTS_LABEL,
            CONF_POINTS_ICON: DEFAULT_POINTS_ICON,
        },
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


def create_mock_participant_data(
    participant_id: str,
    name: str,
    *,
    is_admin: bool = False,
    lifecycle: str = "active",
    ha_user_id: str | None = None,
) -> dict[str, Any]:
    """Create mock participant data for testing."""
    return {
        "internal_id": participant_id,
        "name": name,
        "ha_user_id": ha_user_id,
        "is_admin": is_admin,
        "lifecycle": lifecycle,
        "points": 0,
        "created_at": "2024-05-01T08:00:00+00:00",
    }


def create_mock_entry_data(
    entry_id: str = ENTRY_ID,
    author_id: str = ALICE_ID,
    target_date: str = ENTRY_DATE,
    **overrides: Any,
) -> dict[str, Any]:
    """Create mock board entry data for testing."""
    entry = {
        "internal_id": entry_id,
        "author_id": author_id,
        "category": "handover",
        "title": "Monday briefing",
        "body": "Check the fridge temperatures.",
        "target_date": target_date,
        "is_urgent": False,
        "deadline": None,
        "bounty_points": 0,
        "status": "UNREAD",
        "solved_by": None,
        "solved_at": None,
        "recurrence_group_id": None,
        "parent_id": None,
        "visibility": "visible",
        "entry_type": "standard",
        "target_participant_id": None,
        "created_at": "2024-06-01T08:00:00+00:00",
        "updated_at": None,
        "updated_by": None,
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return mock storage data: four participants and one entry."""
    data = StaffBoardStore.get_default_structure()
    data[DATA_PARTICIPANTS] = {
        ALICE_ID: create_mock_participant_data(ALICE_ID, "Alice"),
        BOB_ID: create_mock_participant_data(BOB_ID, "Bob"),
        CAROL_ID: create_mock_participant_data(CAROL_ID, "Carol", is_admin=True),
        DAVE_ID: create_mock_participant_data(DAVE_ID, "Dave", lifecycle="deleted"),
    }
    data[DATA_ENTRIES] = {ENTRY_ID: create_mock_entry_data()}
    return data


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the StaffBoard integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def coordinator(
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> StaffBoardCoordinator:
    """Return the coordinator of the loaded test entry."""
    return init_integration.runtime_data
