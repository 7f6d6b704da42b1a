"""Manager modules for StaffBoard integration.

Managers own stateful workflows and persistence; engines stay pure:
- base_manager: Shared emit/store plumbing
- participant_manager: Staff profiles and lifecycle
- economy_manager: Point ledger and balances
- engagement_manager: Engagement toggles and aggregate status
- entry_manager: Entries, replies, recurrence groups
- duty_manager: Duty roster
"""

from .base_manager import BaseManager
from .duty_manager import DutyManager
from .economy_manager import EconomyManager
from .engagement_manager import EngagementManager
from .entry_manager import EntryManager
from .participant_manager import ParticipantManager

__all__ = [
    "BaseManager",
    "DutyManager",
    "EconomyManager",
    "EngagementManager",
    "EntryManager",
    "ParticipantManager",
]
