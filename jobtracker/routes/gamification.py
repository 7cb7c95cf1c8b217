"""
Gamification and milestone HTTP routes.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobtracker.auth import get_current_user
from jobtracker.database import get_db
from jobtracker.domain import GamificationState, Milestone, RankSummary
from jobtracker.exceptions import DatabaseException
from jobtracker.models import User
from jobtracker.schemas import CurrentMilestoneResponse, GamificationOutcomeResponse
from jobtracker.services.gamification_engine import format_summary
from jobtracker.services.gamification_service import GamificationService

router = APIRouter(tags=["gamification"])


def build_outcome(service: GamificationService, state, milestones) -> GamificationOutcomeResponse:
    return GamificationOutcomeResponse(
        state=state,
        summary=format_summary(state, service.rank_table),
        milestones=milestones,
    )


@router.post("/api/gamification/session", response_model=GamificationOutcomeResponse)
def start_session(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Load (or create) the state and record today's streak tick."""
    service = GamificationService(db)
    try:
        state, milestones = service.start_session(user)
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))
    return build_outcome(service, state, milestones)


@router.delete("/api/gamification/session", status_code=status.HTTP_204_NO_CONTENT)
def end_session(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Sign-out: discard undisplayed milestones."""
    GamificationService(db).end_session(user)


@router.get("/api/gamification", response_model=GamificationState)
def get_state(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        return GamificationService(db).get_state(user)
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/gamification/summary", response_model=RankSummary)
def get_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Rank card data: rank, points, streak, progress to next rank."""
    try:
        return GamificationService(db).get_summary(user)
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/milestones/current", response_model=CurrentMilestoneResponse)
def get_current_milestone(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Milestone to display now; expired ones are replaced by the next."""
    service = GamificationService(db)
    milestone = service.current_milestone(user)
    return CurrentMilestoneResponse(
        milestone=milestone,
        pending=len(service.pending_milestones(user)),
    )


@router.get("/api/milestones/pending", response_model=List[Milestone])
def get_pending_milestones(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return GamificationService(db).pending_milestones(user)


@router.post("/api/milestones/dismiss", response_model=CurrentMilestoneResponse)
def dismiss_milestone(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Acknowledge the displayed milestone and promote the next one."""
    service = GamificationService(db)
    milestone = service.dismiss_milestone(user)
    return CurrentMilestoneResponse(
        milestone=milestone,
        pending=len(service.pending_milestones(user)),
    )
