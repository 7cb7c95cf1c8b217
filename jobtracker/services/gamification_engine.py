"""
Gamification engine.

Pure functions over immutable GamificationState snapshots. Nothing here
reads the clock, touches the database or raises for a well-typed input:
``today`` is always passed in by the caller.
"""
from datetime import date
from typing import List, Sequence, Tuple

from jobtracker.constants import POINTS_STREAK_BONUS
from jobtracker.domain import Action, GamificationState, Milestone, RankSummary, StreakChange
from jobtracker.services.milestone_service import detect_milestones
from jobtracker.services.points_service import PointsService
from jobtracker.services.rank_service import DEFAULT_RANK_TABLE, RankTable
from jobtracker.services.streak_service import StreakService


def initial_state(
    applications: Sequence = (),
    rank_table: RankTable = DEFAULT_RANK_TABLE
) -> GamificationState:
    """
    State for a user seen for the first time.

    Pre-existing applications are converted into retroactive points so a
    user who tracked applications before scoring existed starts with the
    matching rank.
    """
    points = PointsService.retroactive_points(applications)
    return GamificationState(
        points=points,
        streak_days=0,
        last_activity=None,
        rank=rank_table.rank_for(points),
    )


def compute_new_state(
    old_state: GamificationState,
    action: Action,
    today: date,
    rank_table: RankTable = DEFAULT_RANK_TABLE
) -> GamificationState:
    """
    Apply an action to a state and return the resulting snapshot.

    Steps:
    1. Streak: START/RESET set the streak to 1, INCREMENT adds a day and
       the streak bonus, NO_CHANGE leaves it alone.
    2. last_activity becomes today.
    3. The action's points are added.
    4. Rank is recomputed from the new total.
    """
    points = old_state.points
    streak_days = old_state.streak_days

    change = StreakService.streak_delta(old_state.last_activity, today)
    if change == StreakChange.INCREMENT:
        streak_days += 1
        points += POINTS_STREAK_BONUS
    elif change in (StreakChange.START, StreakChange.RESET):
        streak_days = 1

    points += PointsService.points_for(action)

    return old_state.model_copy(update={
        "points": points,
        "streak_days": streak_days,
        "last_activity": today,
        "rank": rank_table.rank_for(points),
    })


def apply_action(
    old_state: GamificationState,
    action: Action,
    applications: Sequence,
    today: date,
    rank_table: RankTable = DEFAULT_RANK_TABLE
) -> Tuple[GamificationState, List[Milestone]]:
    """New state plus the milestones it triggered against ``applications``"""
    new_state = compute_new_state(old_state, action, today, rank_table)
    return new_state, detect_milestones(old_state, new_state, applications)


def format_summary(
    state: GamificationState,
    rank_table: RankTable = DEFAULT_RANK_TABLE
) -> RankSummary:
    """Display projection of a state for rank cards and stat widgets"""
    next_rank = rank_table.next_rank(state.points)
    # Half-up rounding; 100 is reserved for the top rank
    progress = int(rank_table.progress(state.points) + 0.5)
    if next_rank.name is not None:
        progress = min(progress, 99)

    return RankSummary(
        rank=state.rank,
        points=state.points,
        streak=state.streak_days,
        progress_percent=progress,
        next_rank=next_rank.name,
        points_to_next=next_rank.points_needed,
    )
