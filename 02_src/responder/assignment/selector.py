"""Picks a team member to take over a conversation."""

import random
from datetime import datetime, timedelta
from typing import Callable, Sequence

from ..config import Settings
from ..logging_config import get_logger
from ..models import TeamMember

logger = get_logger(__name__)

ONLINE_WINDOW = timedelta(minutes=30)


def is_online(member: TeamMember, now: datetime) -> bool:
    """Auto availability and seen within the last 30 minutes."""
    if member.availability_mode != "auto" or member.last_seen_at is None:
        return False
    return now - member.last_seen_at <= ONLINE_WINDOW


def is_eligible(member: TeamMember, settings: Settings, now: datetime) -> bool:
    if member.status != "active":
        return False
    if settings.team_blacklist and member.id in settings.team_blacklist:
        return False
    if settings.team_whitelist and member.id not in settings.team_whitelist:
        return False
    if settings.assign_only_to_online_members and not is_online(member, now):
        return False
    if settings.skip_team_roles and member.role in settings.skip_team_roles:
        return False
    return True


def select_member(
    members: Sequence[TeamMember],
    settings: Settings,
    now: datetime,
    choose: Callable[[Sequence[TeamMember]], TeamMember] = random.choice,
) -> TeamMember | None:
    """Uniformly pick one eligible member, or None when nobody qualifies."""
    candidates = [member for member in members if is_eligible(member, settings, now)]
    if not candidates:
        logger.warning("Unable to assign chat: no eligible team members")
        return None
    return choose(candidates)
