"""Human handoff module."""

from .selector import ONLINE_WINDOW, is_eligible, is_online, select_member
from .service import AssignmentService, IAssignmentService

__all__ = [
    "AssignmentService",
    "IAssignmentService",
    "ONLINE_WINDOW",
    "is_eligible",
    "is_online",
    "select_member",
]
