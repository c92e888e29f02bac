from .availability import (
    AvailabilityReplace,
    AvailabilityUpdate,
    SlotAvailability,
    SlotSelection,
)
from .team import (
    MemberAvailability,
    TeamCreate,
    TeamMemberCreate,
    TeamMemberDelete,
    TeamMemberRead,
    TeamMemberUpdate,
    TeamProfile,
    TeamRead,
    TeamUpdate,
)
from .time_slot import TimeSlotCreate, TimeSlotRead, TimeSlotUpdate
from .user import PlayerRead, RefreshTokenRequest, SessionRead, TokenPair

__all__ = [
    "AvailabilityReplace",
    "AvailabilityUpdate",
    "MemberAvailability",
    "PlayerRead",
    "RefreshTokenRequest",
    "SessionRead",
    "SlotAvailability",
    "SlotSelection",
    "TeamCreate",
    "TeamMemberCreate",
    "TeamMemberDelete",
    "TeamMemberRead",
    "TeamMemberUpdate",
    "TeamProfile",
    "TeamRead",
    "TeamUpdate",
    "TimeSlotCreate",
    "TimeSlotRead",
    "TimeSlotUpdate",
    "TokenPair",
]
