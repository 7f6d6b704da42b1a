# File: sensor.py
"""Sensors for the StaffBoard integration.

One points sensor per participant. Participants added at runtime get their
sensor through the participant_added signal without a reload.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .const import ParticipantLifecycle
from .coordinator import StaffBoardConfigEntry, StaffBoardCoordinator
from .entity import StaffBoardCoordinatorEntity
from .helpers.device_helpers import create_participant_device_info
from .helpers.entity_helpers import get_event_signal, get_participant_points_unique_id

# Coordinator-based entities don't poll
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: StaffBoardConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up sensors for StaffBoard integration."""
    coordinator = entry.runtime_data

    entities = [
        ParticipantPointsSensor(coordinator, entry, participant_id, participant)
        for participant_id, participant in coordinator.participants_data.items()
        if participant.get(const.DATA_PARTICIPANT_LIFECYCLE)
        != ParticipantLifecycle.DELETED
    ]
    async_add_entities(entities)

    @callback
    def _async_participant_added(payload: dict[str, Any]) -> None:
        """Add a points sensor for a participant created after setup."""
        participant_id = payload["participant_id"]
        participant = coordinator.participants_data.get(participant_id)
        if participant is None:
            return
        const.LOGGER.debug(
            "DEBUG: Adding points sensor for new participant %s", participant_id
        )
        async_add_entities(
            [ParticipantPointsSensor(coordinator, entry, participant_id, participant)]
        )

    entry.async_on_unload(
        async_dispatcher_connect(
            hass,
            get_event_signal(entry.entry_id, const.SIGNAL_SUFFIX_PARTICIPANT_ADDED),
            _async_participant_added,
        )
    )


class ParticipantPointsSensor(StaffBoardCoordinatorEntity, SensorEntity):
    """Sensor for a participant's point balance.

    The state is the cached balance; the most recent ledger rows are exposed as
    attributes so dashboards can show where points came from.
    """

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_SENSOR_PARTICIPANT_POINTS
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self,
        coordinator: StaffBoardCoordinator,
        entry: StaffBoardConfigEntry,
        participant_id: str,
        participant: dict[str, Any],
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: StaffBoardCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            participant_id: Internal id of the participant.
            participant: Participant record at creation time.
        """
        super().__init__(coordinator)
        self._participant_id = participant_id
        self._participant_name = participant.get(
            const.DATA_PARTICIPANT_NAME, participant_id
        )
        self._attr_unique_id = get_participant_points_unique_id(
            entry.entry_id, participant_id
        )
        self._attr_native_unit_of_measurement = coordinator.points_label
        self._attr_icon = coordinator.points_icon
        self._attr_translation_placeholders = {
            "participant_name": self._participant_name,
            "points_label": coordinator.points_label,
        }
        self._attr_device_info = create_participant_device_info(
            participant_id, self._participant_name, entry
        )

    @property
    def available(self) -> bool:
        """Unavailable once the participant is gone or deleted."""
        participant = self.coordinator.participants_data.get(self._participant_id)
        return (
            super().available
            and participant is not None
            and participant.get(const.DATA_PARTICIPANT_LIFECYCLE)
            != ParticipantLifecycle.DELETED
        )

    @property
    def native_value(self) -> int:
        """Return the participant's balance."""
        return self.coordinator.economy_manager.get_balance(self._participant_id)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose lifecycle and the most recent ledger rows."""
        participant = self.coordinator.participants_data.get(self._participant_id, {})
        history = self.coordinator.economy_manager.get_history(
            self._participant_id, const.SENSOR_RECENT_LEDGER_LIMIT
        )
        return {
            const.ATTR_PARTICIPANT_NAME: participant.get(
                const.DATA_PARTICIPANT_NAME, self._participant_name
            ),
            const.ATTR_LIFECYCLE: participant.get(const.DATA_PARTICIPANT_LIFECYCLE),
            const.ATTR_RECENT_LEDGER: [
                {
                    "amount": row[const.DATA_LEDGER_AMOUNT],
                    "reason": row[const.DATA_LEDGER_REASON],
                    "entry_id": row.get(const.DATA_LEDGER_ENTRY_ID),
                    "timestamp": row[const.DATA_LEDGER_TIMESTAMP],
                }
                for row in reversed(history)
            ],
        }
