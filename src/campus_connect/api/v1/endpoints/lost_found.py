"""Lost-and-found endpoints."""

from typing import Literal

from fastapi import APIRouter, Response, status

from campus_connect.schemas.lost_found import (
    ClaimerResponse,
    ConfirmClaimRequest,
    LostFoundItemResponse,
    LostFoundReport,
)
from campus_connect.services import lost_found as lost_found_service
from campus_connect.services.feed import lost_found_feed

from ..dependencies import CurrentUidDep, CurrentUserDep, SessionDep

router = APIRouter(prefix="/lost-found", tags=["lost-found"])


@router.get("/", response_model=list[LostFoundItemResponse])
def list_items(db: SessionDep, kind: Literal["lost", "found"] = "lost") -> list[LostFoundItemResponse]:
    """Active lost or found reports, most recent first."""
    return [LostFoundItemResponse.model_validate(item) for item in lost_found_feed(db, kind)]


@router.get("/mine", response_model=list[LostFoundItemResponse])
def list_my_items(uid: CurrentUidDep, db: SessionDep) -> list[LostFoundItemResponse]:
    items = lost_found_service.list_user_items(db, uid)
    return [LostFoundItemResponse.model_validate(item) for item in items]


@router.post("/lost", response_model=LostFoundItemResponse, status_code=status.HTTP_201_CREATED)
def report_lost(report: LostFoundReport, current_user: CurrentUserDep, db: SessionDep) -> LostFoundItemResponse:
    item = lost_found_service.report_lost(db, current_user, report)
    return LostFoundItemResponse.model_validate(item)


@router.post("/found", response_model=LostFoundItemResponse, status_code=status.HTTP_201_CREATED)
def report_found(report: LostFoundReport, current_user: CurrentUserDep, db: SessionDep) -> LostFoundItemResponse:
    item = lost_found_service.report_found(db, current_user, report)
    return LostFoundItemResponse.model_validate(item)


@router.post(
    "/{item_id}/report-found",
    response_model=LostFoundItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def report_item_as_found(item_id: int, current_user: CurrentUserDep, db: SessionDep) -> LostFoundItemResponse:
    """Turn someone's lost report into a found report held by the caller."""
    item = lost_found_service.report_item_as_found(db, item_id, current_user)
    return LostFoundItemResponse.model_validate(item)


@router.post("/{item_id}/claim", status_code=status.HTTP_204_NO_CONTENT)
def claim_item(item_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    lost_found_service.claim_item(db, item_id, current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{item_id}/claim", status_code=status.HTTP_204_NO_CONTENT)
def unclaim_item(item_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    lost_found_service.unclaim_item(db, item_id, current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{item_id}/claimers", response_model=list[ClaimerResponse])
def list_claimers(item_id: int, uid: CurrentUidDep, db: SessionDep) -> list[ClaimerResponse]:
    """Reporter-only list of students claiming the item."""
    claimers = lost_found_service.list_claimers(db, item_id, uid)
    return [
        ClaimerResponse(
            uid=c.uid,
            name=c.name,
            scholar_number=c.scholar_number,
            claimed_at=c.claimed_at,
        )
        for c in claimers
    ]


@router.post("/{item_id}/confirm", response_model=LostFoundItemResponse)
def confirm_claim(
    item_id: int,
    confirm_data: ConfirmClaimRequest,
    uid: CurrentUidDep,
    db: SessionDep,
) -> LostFoundItemResponse:
    """Hand the item over to one claimer and close it."""
    item = lost_found_service.confirm_claim(db, item_id, uid, confirm_data.claimer_uid)
    return LostFoundItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: int, uid: CurrentUidDep, db: SessionDep) -> Response:
    lost_found_service.delete_item(db, item_id, uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
