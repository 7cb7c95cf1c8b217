"""
Application HTTP routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from jobtracker.auth import get_current_user
from jobtracker.database import get_db
from jobtracker.exceptions import (
    ApplicationNotFoundException,
    DatabaseException,
    ValidationException,
)
from jobtracker.models import User
from jobtracker.routes.gamification import build_outcome
from jobtracker.schemas import (
    ApplicationActionResponse,
    ApplicationCreate,
    ApplicationImportItem,
    ApplicationImportResponse,
    ApplicationResponse,
    ApplicationStatsResponse,
    ApplicationUpdate,
)
from jobtracker.services.application_service import ApplicationService

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.get("", response_model=List[ApplicationResponse])
def list_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Get applications, optionally filtered by status ("all" for everything)."""
    try:
        return ApplicationService(db).list(user, status_filter)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/stats", response_model=ApplicationStatsResponse)
def get_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return ApplicationService(db).get_stats(user)


@router.post("", response_model=ApplicationActionResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = ApplicationService(db)
    try:
        application, (state, milestones) = service.create(user, payload)
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ApplicationActionResponse(
        application=ApplicationResponse.model_validate(application),
        gamification=build_outcome(service.gamification, state, milestones),
    )


@router.post("/import", response_model=ApplicationImportResponse, status_code=status.HTTP_201_CREATED)
def import_applications(
    payload: List[ApplicationImportItem],
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Bulk insert; missing fields fall back to defaults."""
    service = ApplicationService(db)
    try:
        applications, (state, milestones) = service.bulk_import(user, payload)
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ApplicationImportResponse(
        imported=len(applications),
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        gamification=build_outcome(service.gamification, state, milestones),
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        return ApplicationService(db).get(user, application_id)
    except ApplicationNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{application_id}", response_model=ApplicationActionResponse)
def update_application(
    application_id: int,
    payload: ApplicationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Update an application; a status change is scored."""
    service = ApplicationService(db)
    try:
        application, outcome = service.update(user, application_id, payload)
    except ApplicationNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))

    gamification = None
    if outcome:
        gamification = build_outcome(service.gamification, *outcome)
    return ApplicationActionResponse(
        application=ApplicationResponse.model_validate(application),
        gamification=gamification,
    )


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        ApplicationService(db).delete(user, application_id)
    except ApplicationNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseException as e:
        raise HTTPException(status_code=500, detail=str(e))
