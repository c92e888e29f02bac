from .availability_entry import AvailabilityEntry
from .team import Team
from .team_member import TeamMember
from .time_slot import TimeSlot
from .user import User

__all__ = [
    "AvailabilityEntry",
    "Team",
    "TeamMember",
    "TimeSlot",
    "User",
]
