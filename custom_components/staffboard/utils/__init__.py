"""Pure utility functions for StaffBoard (no Home Assistant imports)."""
