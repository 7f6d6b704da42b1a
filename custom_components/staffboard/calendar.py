# File: calendar.py
"""Calendar platform for the StaffBoard integration.

Provides a read-only, board-wide calendar of the duty roster: one all-day
event per date naming everyone on duty in slot order.
"""

from __future__ import annotations

import datetime
from typing import Any

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import StaffBoardConfigEntry, StaffBoardCoordinator
from .entity import StaffBoardCoordinatorEntity
from .helpers.device_helpers import create_board_device_info
from .utils.dt_utils import dt_today_local

# Coordinator-based entities don't poll
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: StaffBoardConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the StaffBoard duty roster calendar."""
    async_add_entities([DutyRosterCalendar(entry.runtime_data, entry)])


class DutyRosterCalendar(StaffBoardCoordinatorEntity, CalendarEntity):
    """Calendar entity showing who is on duty each day."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_CALENDAR_DUTY_ROSTER

    def __init__(
        self, coordinator: StaffBoardCoordinator, entry: StaffBoardConfigEntry
    ) -> None:
        """Initialize the calendar entity."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}_{const.CALENDAR_KEY_DUTY_ROSTER}"
        self._attr_device_info = create_board_device_info(entry)

    def _events_between(
        self, start_date: datetime.date, end_date: datetime.date
    ) -> list[CalendarEvent]:
        """Build one all-day event per rostered date in [start_date, end_date]."""
        participants = self.coordinator.participants_data
        names_by_date: dict[str, list[str]] = {}
        for row in self.coordinator.duty_manager.get_assignments_in_range(
            start_date, end_date
        ):
            assignee_id = row[const.DATA_DUTY_ASSIGNEE_ID]
            name = participants.get(assignee_id, {}).get(
                const.DATA_PARTICIPANT_NAME, assignee_id
            )
            names_by_date.setdefault(row[const.DATA_DUTY_DATE], []).append(name)

        events = []
        for iso_date, names in names_by_date.items():
            day = datetime.date.fromisoformat(iso_date)
            events.append(
                CalendarEvent(
                    summary=", ".join(names),
                    start=day,
                    end=day + datetime.timedelta(days=1),
                    uid=f"{const.CALENDAR_KEY_DUTY_ROSTER}_{iso_date}",
                )
            )
        return events

    async def async_get_events(
        self,
        hass: HomeAssistant,
        start_date: datetime.datetime,
        end_date: datetime.datetime,
    ) -> list[CalendarEvent]:
        """Return duty events overlapping [start_date, end_date)."""
        last_day = (end_date - datetime.timedelta(microseconds=1)).date()
        return self._events_between(start_date.date(), last_day)

    @property
    def event(self) -> CalendarEvent | None:
        """Return today's duty event, if anyone is on duty."""
        today = dt_today_local()
        events = self._events_between(today, today)
        return events[0] if events else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose today's assignees by slot."""
        participants = self.coordinator.participants_data
        return {
            const.ATTR_DUTY_ASSIGNEES: {
                str(row[const.DATA_DUTY_SLOT]): participants.get(
                    row[const.DATA_DUTY_ASSIGNEE_ID], {}
                ).get(const.DATA_PARTICIPANT_NAME)
                for row in self.coordinator.duty_manager.get_assignees(
                    dt_today_local()
                )
            }
        }
