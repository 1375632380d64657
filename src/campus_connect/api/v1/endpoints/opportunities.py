"""Job and internship endpoints."""

from fastapi import APIRouter, Response, status

from campus_connect.core.exceptions import NotFoundError
from campus_connect.schemas.opportunity import (
    OpportunityCreate,
    OpportunityResponse,
    OpportunityUpdate,
)
from campus_connect.services import opportunities as opportunity_service
from campus_connect.services.eligibility import is_visible
from campus_connect.services.feed import opportunity_feed

from ..dependencies import CurrentUserDep, SessionDep, ViewerDep

router = APIRouter(prefix="/opportunities", tags=["opportunities"])


@router.get("/", response_model=list[OpportunityResponse])
def list_opportunities(db: SessionDep, viewer: ViewerDep) -> list[OpportunityResponse]:
    """Open opportunities the caller is eligible for, closest deadline first."""
    return [OpportunityResponse.model_validate(o) for o in opportunity_feed(db, viewer.profile)]


@router.post("/", response_model=OpportunityResponse, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    opportunity_data: OpportunityCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> OpportunityResponse:
    opportunity = opportunity_service.create_opportunity(db, current_user, opportunity_data)
    return OpportunityResponse.model_validate(opportunity)


@router.get("/mine", response_model=list[OpportunityResponse])
def list_my_opportunities(current_user: CurrentUserDep, db: SessionDep) -> list[OpportunityResponse]:
    opportunities = opportunity_service.list_user_opportunities(db, current_user.uid)
    return [OpportunityResponse.model_validate(o) for o in opportunities]


@router.get("/{opportunity_id}", response_model=OpportunityResponse)
def get_opportunity(opportunity_id: int, db: SessionDep, viewer: ViewerDep) -> OpportunityResponse:
    opportunity = opportunity_service.get_opportunity(db, opportunity_id)
    if opportunity.poster_uid != viewer.uid and not is_visible(viewer.profile, opportunity.visibility):
        raise NotFoundError("Opportunity", opportunity_id)
    return OpportunityResponse.model_validate(opportunity)


@router.patch("/{opportunity_id}", response_model=OpportunityResponse)
def update_opportunity(
    opportunity_id: int,
    opportunity_data: OpportunityUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> OpportunityResponse:
    opportunity = opportunity_service.update_opportunity(
        db, opportunity_id, current_user.uid, opportunity_data
    )
    return OpportunityResponse.model_validate(opportunity)


@router.delete("/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_opportunity(opportunity_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    opportunity_service.delete_opportunity(db, opportunity_id, current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
