# File: helpers/__init__.py
"""Home Assistant-bound helper functions for StaffBoard.

This module contains functions that REQUIRE Home Assistant dependencies.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - entity_helpers: Signal names, name lookups, unique_id construction
    - auth_helpers: Coordinator access and acting-participant resolution
    - device_helpers: DeviceInfo construction
"""

from . import auth_helpers, device_helpers, entity_helpers

__all__ = ["auth_helpers", "device_helpers", "entity_helpers"]
