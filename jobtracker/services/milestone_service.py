"""
Milestone detection.

Compares the state before and after an action, together with the live
application list, and returns every milestone that fired. Detectors run
in a fixed order so simultaneous milestones display deterministically:

1. rank_up
2. first_application
3. ten_applications
4. first_interview
5. first_offer
6. five_day_streak

"First interview" and "first offer" use the old point total as a proxy
for "has this happened before". A manual point adjustment or a
retroactive seed past the threshold suppresses them; a total still below
the threshold lets them fire again. Both checks live in the two
``had_*_before`` predicates so they can be swapped for persisted flags.
"""
from typing import List, Optional, Sequence

from jobtracker.constants import (
    POINTS_APPLICATION,
    POINTS_INTERVIEW,
    POINTS_OFFER,
    INTERVIEW_OR_BETTER,
    OFFER_OR_BETTER,
    MILESTONE_RANK_UP,
    MILESTONE_FIRST_APPLICATION,
    MILESTONE_TEN_APPLICATIONS,
    MILESTONE_FIRST_INTERVIEW,
    MILESTONE_FIRST_OFFER,
    MILESTONE_FIVE_DAY_STREAK,
    MILESTONE_TIERS,
    MILESTONE_TEXTS,
    TEN_APPLICATIONS_COUNT,
    FIVE_DAY_STREAK,
)
from jobtracker.domain import GamificationState, Milestone

INTERVIEW_POINTS_THRESHOLD = POINTS_INTERVIEW
OFFER_POINTS_THRESHOLD = POINTS_APPLICATION + POINTS_INTERVIEW + POINTS_OFFER


def build_milestone(milestone_type: str, rank: Optional[str] = None) -> Milestone:
    """Milestone record with its tier and display texts"""
    title, message = MILESTONE_TEXTS[milestone_type]
    if milestone_type == MILESTONE_RANK_UP:
        title = title.format(rank=rank)
        message = message.format(rank=rank)
    return Milestone(
        type=milestone_type,
        tier=MILESTONE_TIERS[milestone_type],
        title=title,
        message=message,
    )


def had_interview_before(old_state: GamificationState) -> bool:
    """Heuristic: an earlier interview would have pushed points past 25"""
    return old_state.points >= INTERVIEW_POINTS_THRESHOLD


def had_offer_before(old_state: GamificationState) -> bool:
    """Heuristic: application + interview + offer points already reached"""
    return old_state.points >= OFFER_POINTS_THRESHOLD


def detect_milestones(
    old_state: GamificationState,
    new_state: GamificationState,
    applications: Sequence
) -> List[Milestone]:
    """
    Detect milestones triggered between two state snapshots.

    Args:
        old_state: State before the action
        new_state: State after the action
        applications: Current application records (``status`` attribute)

    Returns:
        Milestones in display order (possibly empty)
    """
    milestones = []
    count = len(applications)

    if old_state.rank != new_state.rank:
        milestones.append(build_milestone(MILESTONE_RANK_UP, rank=new_state.rank))

    # points == 0 guards against users seeded with retroactive points
    if count == 1 and old_state.points == 0:
        milestones.append(build_milestone(MILESTONE_FIRST_APPLICATION))

    # Exact match: fires again if the count drops below 10 and comes back
    if count == TEN_APPLICATIONS_COUNT:
        milestones.append(build_milestone(MILESTONE_TEN_APPLICATIONS))

    has_interview = any(app.status in INTERVIEW_OR_BETTER for app in applications)
    if has_interview and not had_interview_before(old_state):
        milestones.append(build_milestone(MILESTONE_FIRST_INTERVIEW))

    has_offer = any(app.status in OFFER_OR_BETTER for app in applications)
    if has_offer and not had_offer_before(old_state):
        milestones.append(build_milestone(MILESTONE_FIRST_OFFER))

    if new_state.streak_days == FIVE_DAY_STREAK and old_state.streak_days < FIVE_DAY_STREAK:
        milestones.append(build_milestone(MILESTONE_FIVE_DAY_STREAK))

    return milestones
