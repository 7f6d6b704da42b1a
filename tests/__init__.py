"""Tests for the StaffBoard integration."""
