"""Tests for StaffBoard services.

Covers participant resolution from the calling user, ``acting_as`` rules,
service responses, administrator-only services, and unloading.
"""

# pylint: disable=redefined-outer-name

from __future__ import annotations

from datetime import date
from typing import Any

from homeassistant.core import Context, HomeAssistant
from homeassistant.exceptions import (
    HomeAssistantError,
    ServiceValidationError,
    Unauthorized,
)
import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry
import voluptuous as vol

from custom_components.staffboard import const
from custom_components.staffboard.coordinator import StaffBoardCoordinator

from .conftest import ALICE_ID, BOB_ID, ENTRY_DATE, ENTRY_ID


@pytest.fixture
def linked_coordinator(
    coordinator: StaffBoardCoordinator, mock_hass_users: dict[str, Any]
) -> StaffBoardCoordinator:
    """Link Alice and Bob to their Home Assistant users."""
    coordinator.participants_data[ALICE_ID]["ha_user_id"] = mock_hass_users["alice"].id
    coordinator.participants_data[BOB_ID]["ha_user_id"] = mock_hass_users["bob"].id
    return coordinator


async def _call(
    hass: HomeAssistant,
    service: str,
    data: dict[str, Any],
    user_id: str | None = None,
    *,
    return_response: bool = True,
) -> Any:
    """Call a StaffBoard service as the given user."""
    return await hass.services.async_call(
        const.DOMAIN,
        service,
        data,
        blocking=True,
        return_response=return_response,
        context=Context(user_id=user_id),
    )


class TestToggleEngagementService:
    """Tests for the toggle_engagement service."""

    async def test_linked_user_toggles(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that the calling user's participant is used."""
        response = await _call(
            hass,
            const.SERVICE_TOGGLE_ENGAGEMENT,
            {"entry_id": ENTRY_ID, "action": "WORKING"},
            mock_hass_users["bob"].id,
        )

        assert response == {
            "toggled_off": False,
            "new_participant_status": "WORKING",
            "new_aggregate_status": "WORKING",
            "aggregate_changed": True,
            "points_delta": const.POINTS_WORKING,
        }
        assert linked_coordinator.economy_manager.get_balance(BOB_ID) == (
            const.POINTS_WORKING
        )

    async def test_unlinked_user_rejected(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that users without a participant cannot toggle."""
        with pytest.raises(Unauthorized):
            await _call(
                hass,
                const.SERVICE_TOGGLE_ENGAGEMENT,
                {"entry_id": ENTRY_ID, "action": "CONFIRMED"},
                mock_hass_users["stranger"].id,
            )
        assert linked_coordinator.store.ledger == []

    async def test_system_call_acting_as(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that automations may act for a named participant."""
        response = await _call(
            hass,
            const.SERVICE_TOGGLE_ENGAGEMENT,
            {"entry_id": ENTRY_ID, "action": "SOLVED", "acting_as": "Alice"},
        )

        assert response["new_aggregate_status"] == "SOLVED"
        assert linked_coordinator.entries_data[ENTRY_ID]["solved_by"] == ALICE_ID

    async def test_acting_as_someone_else_rejected(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that a regular user cannot act for another participant."""
        with pytest.raises(Unauthorized):
            await _call(
                hass,
                const.SERVICE_TOGGLE_ENGAGEMENT,
                {"entry_id": ENTRY_ID, "action": "SOLVED", "acting_as": "Alice"},
                mock_hass_users["bob"].id,
            )

    async def test_admin_may_act_as(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that Home Assistant administrators may act for anyone."""
        response = await _call(
            hass,
            const.SERVICE_TOGGLE_ENGAGEMENT,
            {"entry_id": ENTRY_ID, "action": "CONFIRMED", "acting_as": "Bob"},
            mock_hass_users["admin"].id,
        )
        assert response["new_participant_status"] == "CONFIRMED"

    async def test_unknown_acting_as(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that acting_as must name a participant."""
        with pytest.raises(HomeAssistantError) as err:
            await _call(
                hass,
                const.SERVICE_TOGGLE_ENGAGEMENT,
                {"entry_id": ENTRY_ID, "action": "CONFIRMED", "acting_as": "Nobody"},
            )
        assert err.value.translation_key == const.TRANS_KEY_ERROR_NOT_FOUND


class TestEntryServices:
    """Tests for entry and recurrence group services."""

    async def test_create_recurring_entry(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that a recurring create returns the ids and the group."""
        response = await _call(
            hass,
            const.SERVICE_CREATE_ENTRY,
            {
                "title": "Fire drill",
                "target_date": "2024-01-01",
                "recurrence": "custom_ordinal_weekday",
                "end_date": "2024-06-30",
                "weeks_of_month": [1],
                "weekdays": ["1"],
            },
            mock_hass_users["alice"].id,
        )

        assert response["recurrence_group_id"]
        dates = sorted(
            linked_coordinator.entries_data[entry_id]["target_date"]
            for entry_id in response["entry_ids"]
        )
        assert dates == [
            "2024-01-01",
            "2024-02-05",
            "2024-03-04",
            "2024-04-01",
            "2024-05-06",
            "2024-06-03",
        ]

    async def test_create_entry_missing_end_date(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that a recurrence without end date is a validation error."""
        with pytest.raises(ServiceValidationError) as err:
            await _call(
                hass,
                const.SERVICE_CREATE_ENTRY,
                {"title": "Daily", "target_date": "2024-01-01", "recurrence": "daily"},
                mock_hass_users["alice"].id,
            )
        assert err.value.translation_key == const.TRANS_KEY_ERROR_INVALID_RECURRENCE
        assert err.value.translation_placeholders["field"] == "end_date"

    async def test_reply_update_and_delete_group(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test reply creation, editing and group deletion end to end."""
        alice = mock_hass_users["alice"].id

        reply = await _call(
            hass,
            const.SERVICE_CREATE_REPLY,
            {"entry_id": ENTRY_ID, "body": "On it"},
            mock_hass_users["bob"].id,
        )
        assert linked_coordinator.entries_data[reply["reply_id"]]["parent_id"] == (
            ENTRY_ID
        )

        await _call(
            hass,
            const.SERVICE_UPDATE_ENTRY,
            {"entry_id": ENTRY_ID, "is_urgent": True},
            alice,
            return_response=False,
        )
        assert linked_coordinator.entries_data[ENTRY_ID]["is_urgent"] is True

        created = await _call(
            hass,
            const.SERVICE_CREATE_ENTRY,
            {
                "title": "Far future",
                "target_date": "2099-01-01",
                "recurrence": "daily",
                "end_date": "2099-01-05",
            },
            alice,
        )
        removed = await _call(
            hass,
            const.SERVICE_DELETE_RECURRENCE_GROUP,
            {"group_id": created["recurrence_group_id"]},
            alice,
        )
        assert removed == {"removed_entries": 5}

    async def test_interval_above_cap_rejected(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that the schema refuses intervals beyond one year of steps."""
        with pytest.raises(vol.Invalid):
            await _call(
                hass,
                const.SERVICE_CREATE_ENTRY,
                {
                    "title": "Every so often",
                    "target_date": "2024-01-01",
                    "recurrence": "custom_interval",
                    "end_date": "2024-12-31",
                    "interval": const.MAX_RECURRENCE_INTERVAL + 1,
                    "interval_unit": "days",
                },
                mock_hass_users["alice"].id,
            )
        assert linked_coordinator.store.recurrence_groups == {}

    async def test_change_group_frequency(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that a new recurrence replaces the rule and prunes unread dates."""
        alice = mock_hass_users["alice"].id
        created = await _call(
            hass,
            const.SERVICE_CREATE_ENTRY,
            {
                "title": "Far future",
                "target_date": "2099-01-01",
                "recurrence": "daily",
                "end_date": "2099-01-05",
            },
            alice,
        )
        group_id = created["recurrence_group_id"]

        response = await _call(
            hass,
            const.SERVICE_UPDATE_RECURRENCE_GROUP,
            {
                "group_id": group_id,
                "recurrence": "custom_interval",
                "interval": 2,
                "interval_unit": "weeks",
            },
            alice,
        )

        assert response == {"removed_entries": 5}
        group = linked_coordinator.store.recurrence_groups[group_id]
        assert group["kind"] == "custom_interval"
        assert group["recurrence_config"]["interval"] == 2
        assert group["recurrence_config"]["interval_unit"] == "weeks"


class TestDutyServices:
    """Tests for the duty roster services."""

    async def test_single_date_without_recurrence(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that recurrence "none" covers only the start date."""
        response = await _call(
            hass,
            const.SERVICE_APPLY_DUTY_RECURRENCE,
            {"start_date": "2024-06-03", "assignee_name": "Bob"},
            mock_hass_users["alice"].id,
        )

        assert response == {"dates": ["2024-06-03"]}

    async def test_assign_then_clear_with_none(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that assignee "None" switches to clear mode."""
        alice = mock_hass_users["alice"].id
        recurrence = {
            "start_date": "2024-06-03",
            "recurrence": "weekly",
            "end_date": "2024-06-16",
            "weekdays": [1, 3],
        }

        assigned = await _call(
            hass,
            const.SERVICE_APPLY_DUTY_RECURRENCE,
            {**recurrence, "assignee_name": "Bob"},
            alice,
        )
        assert assigned["dates"] == [
            "2024-06-03",
            "2024-06-05",
            "2024-06-10",
            "2024-06-12",
        ]
        assert len(linked_coordinator.store.duty_assignments) == 4

        await _call(
            hass,
            const.SERVICE_APPLY_DUTY_RECURRENCE,
            {**recurrence, "assignee_name": "None"},
            alice,
        )
        assert linked_coordinator.store.duty_assignments == {}

    async def test_unknown_assignee(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that assignee names must resolve."""
        with pytest.raises(HomeAssistantError) as err:
            await _call(
                hass,
                const.SERVICE_SET_DUTY_ASSIGNMENT,
                {"duty_date": "2024-06-03", "assignee_name": "Nobody"},
                mock_hass_users["alice"].id,
                return_response=False,
            )
        assert err.value.translation_key == const.TRANS_KEY_ERROR_NOT_FOUND


class TestBoardServices:
    """Tests for the read-only board and roster services."""

    async def test_get_board_for_linked_user(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that the board carries replies and the caller's own status."""
        bob = mock_hass_users["bob"].id
        await _call(
            hass,
            const.SERVICE_CREATE_REPLY,
            {"entry_id": ENTRY_ID, "body": "Seen"},
            bob,
        )
        await _call(
            hass,
            const.SERVICE_TOGGLE_ENGAGEMENT,
            {"entry_id": ENTRY_ID, "action": "CONFIRMED"},
            bob,
        )

        response = await _call(
            hass, const.SERVICE_GET_BOARD, {"target_date": ENTRY_DATE}, bob
        )

        assert response["date"] == ENTRY_DATE
        assert response["participant_id"] == BOB_ID
        assert response["duty_entry_id"] is None
        assert [entry["internal_id"] for entry in response["entries"]] == [ENTRY_ID]
        entry = response["entries"][0]
        assert entry["status"] == "CONFIRMED"
        assert entry["my_status"] == "CONFIRMED"
        assert [reply["body"] for reply in entry["replies"]] == ["Seen"]

    async def test_get_board_creates_duty_entry(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that a participant on duty finds the duty entry on the board."""
        await linked_coordinator.duty_manager.set_assignment(
            ALICE_ID, date.fromisoformat(ENTRY_DATE), BOB_ID
        )

        response = await _call(
            hass,
            const.SERVICE_GET_BOARD,
            {"target_date": ENTRY_DATE},
            mock_hass_users["bob"].id,
        )

        duty_entry_id = response["duty_entry_id"]
        assert duty_entry_id
        assert duty_entry_id in [entry["internal_id"] for entry in response["entries"]]
        assert linked_coordinator.entries_data[duty_entry_id]["entry_type"] == "duty"

    async def test_get_board_without_participant(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that a system call reads the board without personal fields."""
        response = await _call(
            hass, const.SERVICE_GET_BOARD, {"target_date": ENTRY_DATE}
        )

        assert response["participant_id"] is None
        assert response["entries"][0]["my_status"] is None

    async def test_get_duty_roster(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that the roster lists each slot with the assignee's name."""
        duty = linked_coordinator.duty_manager
        await duty.set_assignment(ALICE_ID, date(2024, 6, 3), BOB_ID, 2)
        await duty.set_assignment(ALICE_ID, date(2024, 6, 3), ALICE_ID, 1)
        await duty.set_assignment(ALICE_ID, date(2024, 6, 10), BOB_ID, 1)

        response = await _call(
            hass,
            const.SERVICE_GET_DUTY_ROSTER,
            {"start_date": "2024-06-01", "end_date": "2024-06-07"},
        )

        assert response == {
            "assignments": [
                {
                    "duty_date": "2024-06-03",
                    "slot": 1,
                    "assignee_id": ALICE_ID,
                    "assignee_name": "Alice",
                },
                {
                    "duty_date": "2024-06-03",
                    "slot": 2,
                    "assignee_id": BOB_ID,
                    "assignee_name": "Bob",
                },
            ]
        }

    async def test_get_duty_roster_reversed_range(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that an end date before the start date is rejected."""
        with pytest.raises(ServiceValidationError) as err:
            await _call(
                hass,
                const.SERVICE_GET_DUTY_ROSTER,
                {"start_date": "2024-06-07", "end_date": "2024-06-01"},
            )
        assert err.value.translation_key == const.TRANS_KEY_ERROR_INVALID_DATE_RANGE


class TestAdministrationServices:
    """Tests for administrator-only services."""

    async def test_add_participant_requires_admin(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test that regular users cannot add participants."""
        with pytest.raises(Unauthorized):
            await _call(
                hass,
                const.SERVICE_ADD_PARTICIPANT,
                {"participant_name": "Erin"},
                mock_hass_users["alice"].id,
            )

        response = await _call(
            hass,
            const.SERVICE_ADD_PARTICIPANT,
            {"participant_name": "Erin"},
            mock_hass_users["admin"].id,
        )
        assert linked_coordinator.participants_data[response["participant_id"]][
            "name"
        ] == "Erin"

    async def test_set_lifecycle(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that a system call may hide a participant."""
        await _call(
            hass,
            const.SERVICE_SET_PARTICIPANT_LIFECYCLE,
            {"participant_name": "Bob", "lifecycle": "hidden"},
            return_response=False,
        )
        assert linked_coordinator.participants_data[BOB_ID]["lifecycle"] == "hidden"

    async def test_rebuild_points(
        self, hass: HomeAssistant, linked_coordinator: StaffBoardCoordinator
    ) -> None:
        """Test that drifted balances are reported and repaired."""
        linked_coordinator.participants_data[ALICE_ID]["points"] = 12

        response = await _call(hass, const.SERVICE_REBUILD_POINTS, {})

        assert response == {"corrected": {ALICE_ID: {"cached": 12, "ledger": 0}}}
        assert linked_coordinator.economy_manager.get_balance(ALICE_ID) == 0

    async def test_set_participant_admin(
        self,
        hass: HomeAssistant,
        linked_coordinator: StaffBoardCoordinator,
        mock_hass_users: dict[str, Any],
    ) -> None:
        """Test promotion, the admin requirement and the last-admin guard."""
        with pytest.raises(Unauthorized):
            await _call(
                hass,
                const.SERVICE_SET_PARTICIPANT_ADMIN,
                {"participant_name": "Alice", "is_admin": True},
                mock_hass_users["alice"].id,
                return_response=False,
            )

        with pytest.raises(ServiceValidationError) as err:
            await _call(
                hass,
                const.SERVICE_SET_PARTICIPANT_ADMIN,
                {"participant_name": "Carol", "is_admin": False},
                mock_hass_users["admin"].id,
                return_response=False,
            )
        assert err.value.translation_key == const.TRANS_KEY_ERROR_LAST_ADMIN

        await _call(
            hass,
            const.SERVICE_SET_PARTICIPANT_ADMIN,
            {"participant_name": "Alice", "is_admin": True},
            mock_hass_users["admin"].id,
            return_response=False,
        )
        assert linked_coordinator.participant_manager.is_admin(ALICE_ID)


async def test_services_removed_on_unload(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test that unloading the last entry removes the services."""
    assert hass.services.has_service(const.DOMAIN, const.SERVICE_TOGGLE_ENGAGEMENT)

    assert await hass.config_entries.async_unload(init_integration.entry_id)
    await hass.async_block_till_done()

    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_TOGGLE_ENGAGEMENT)
