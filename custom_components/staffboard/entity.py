"""Base entity classes for StaffBoard integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import StaffBoardCoordinator


class StaffBoardCoordinatorEntity(CoordinatorEntity[StaffBoardCoordinator]):
    """Base entity class for StaffBoard entities with typed coordinator access."""

    @property
    def coordinator(self) -> StaffBoardCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: StaffBoardCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
