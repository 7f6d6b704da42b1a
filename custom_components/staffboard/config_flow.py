# File: config_flow.py
"""Config flow for the StaffBoard integration.

A single board per Home Assistant instance. Setup asks for the board title,
then the points label and icon; the latter two stay editable in the options
flow. Participants and entries live in storage and are managed via services.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import selector

from . import const


def build_points_schema(
    default_label: str = const.DEFAULT_POINTS_LABEL,
    default_icon: str = const.DEFAULT_POINTS_ICON,
) -> vol.Schema:
    """Build a schema for points label & icon."""
    return vol.Schema(
        {
            vol.Required(const.CONF_POINTS_LABEL, default=default_label): str,
            vol.Optional(
                const.CONF_POINTS_ICON, default=default_icon
            ): selector.IconSelector(),
        }
    )


def build_points_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Build the options dict from points form input."""
    return {
        const.CONF_POINTS_LABEL: user_input.get(
            const.CONF_POINTS_LABEL, const.DEFAULT_POINTS_LABEL
        ).strip(),
        const.CONF_POINTS_ICON: user_input.get(
            const.CONF_POINTS_ICON, const.DEFAULT_POINTS_ICON
        ),
    }


def validate_points_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate points configuration inputs.

    Returns:
        Errors dict for the form (empty when valid).
    """
    errors: dict[str, str] = {}
    if not user_input.get(const.CONF_POINTS_LABEL, "").strip():
        errors["base"] = const.CFOP_ERROR_POINTS_LABEL_REQUIRED
    return errors


class StaffBoardConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for StaffBoard."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self._data: dict[str, Any] = {}

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Ask for the board title."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            board_name = user_input.get(const.CONF_BOARD_NAME, "").strip()
            if board_name:
                self._data[const.CONF_BOARD_NAME] = board_name
                return await self.async_step_points()
            errors["base"] = const.CFOP_ERROR_BOARD_NAME_REQUIRED

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=vol.Schema(
                {
                    vol.Required(
                        const.CONF_BOARD_NAME, default=const.DEFAULT_BOARD_NAME
                    ): str,
                }
            ),
            errors=errors,
        )

    async def async_step_points(self, user_input: dict[str, Any] | None = None):
        """Ask for the points label and icon, then create the entry."""
        errors: dict[str, str] = {}
        if user_input is not None:
            errors = validate_points_inputs(user_input)
            if not errors:
                const.LOGGER.info(
                    "INFO: Creating StaffBoard entry '%s'",
                    self._data[const.CONF_BOARD_NAME],
                )
                return self.async_create_entry(
                    title=self._data[const.CONF_BOARD_NAME],
                    data=self._data,
                    options=build_points_data(user_input),
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_POINTS,
            data_schema=build_points_schema(),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return StaffBoardOptionsFlowHandler()


class StaffBoardOptionsFlowHandler(config_entries.OptionsFlow):
    """Options flow for the points label and icon."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Edit the points label and icon."""
        errors: dict[str, str] = {}
        if user_input is not None:
            errors = validate_points_inputs(user_input)
            if not errors:
                return self.async_create_entry(data=build_points_data(user_input))

        options = self.config_entry.options
        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=build_points_schema(
                options.get(const.CONF_POINTS_LABEL, const.DEFAULT_POINTS_LABEL),
                options.get(const.CONF_POINTS_ICON, const.DEFAULT_POINTS_ICON),
            ),
            errors=errors,
        )
