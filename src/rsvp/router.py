import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.auth.dependencies import get_current_guest
from src.dependencies import get_rsvp_read_model, get_rsvp_write_model
from src.events.dtos import Wedding
from src.guests.dtos import SessionGuestDTO
from src.rsvp.dtos import (
    GuestAttendanceDTO,
    RSVPDetailsDTO,
    RSVPRecordDTO,
    RSVPStatus,
    RSVPSubmissionDTO,
)
from src.rsvp.repository.read_models import RSVPReadModel
from src.rsvp.repository.write_models import RSVPWriteModel
from src.rsvp.urls import RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class GuestAttendanceSubmit(BaseModel):
    name: str
    attending: bool


class RSVPDetailsSchema(BaseModel):
    """Wedding-specific answers."""

    song_request: str | None = None
    accommodation: str | None = None
    allergens: str | None = None
    transport: str | None = None


class RSVPSubmit(BaseModel):
    event: Wedding
    guests_attending: list[GuestAttendanceSubmit]
    events_attending: list[str]
    dietary: str | None = None
    message: str | None = None
    email: str | None = None
    details: RSVPDetailsSchema | None = None


class RSVPSubmitResponse(BaseModel):
    success: bool
    response_id: str
    message: str


class RSVPRecordResponse(BaseModel):
    id: str
    guest_id: str
    event: Wedding
    submitted_at: str
    status: RSVPStatus
    guests_attending: str
    dietary: str | None = None
    message: str | None = None
    details: RSVPDetailsSchema | None = None
    events_attending: list[str] | None = None

    @classmethod
    def from_dto(cls, rsvp: RSVPRecordDTO) -> "RSVPRecordResponse":
        details = None
        if rsvp.details:
            details = RSVPDetailsSchema(
                song_request=rsvp.details.song_request,
                accommodation=rsvp.details.accommodation,
                allergens=rsvp.details.allergens,
                transport=rsvp.details.transport,
            )
        return cls(
            id=rsvp.id,
            guest_id=rsvp.guest_id,
            event=rsvp.event,
            submitted_at=rsvp.submitted_at,
            status=rsvp.status,
            guests_attending=rsvp.guests_attending,
            dietary=rsvp.dietary,
            message=rsvp.message,
            details=details,
            events_attending=rsvp.events_attending,
        )


class LatestRSVPResponse(BaseModel):
    rsvp: RSVPRecordResponse | None = None


class RSVPDeleteResponse(BaseModel):
    success: bool
    message: str


def _require_notion_guest(guest: SessionGuestDTO, model: object | None) -> str:
    if not guest.notion_id or model is None:
        raise HTTPException(status_code=400, detail="Notion backend required for RSVPs")
    return guest.notion_id


def _upstream_failure(action: str, error: Exception) -> HTTPException:
    logger.error(f"RSVP {action} error: {error}")
    return HTTPException(
        status_code=500,
        detail={"error": f"Failed to {action} RSVP", "details": str(error)},
    )


@router.post(RSVP_URL, response_model=RSVPSubmitResponse)
async def submit_rsvp(
    rsvp_data: RSVPSubmit,
    guest: SessionGuestDTO = Depends(get_current_guest),
    write_model: RSVPWriteModel | None = Depends(get_rsvp_write_model),
) -> RSVPSubmitResponse:
    """Submit or update the guest's RSVP for one wedding."""
    guest_id = _require_notion_guest(guest, write_model)

    details = None
    if rsvp_data.details:
        details = RSVPDetailsDTO(
            song_request=rsvp_data.details.song_request,
            accommodation=rsvp_data.details.accommodation,
            allergens=rsvp_data.details.allergens,
            transport=rsvp_data.details.transport,
        )
    submission = RSVPSubmissionDTO(
        event=rsvp_data.event,
        guests_attending=[
            GuestAttendanceDTO(name=item.name, attending=item.attending)
            for item in rsvp_data.guests_attending
        ],
        events_attending=rsvp_data.events_attending,
        dietary=rsvp_data.dietary,
        message=rsvp_data.message,
        email=rsvp_data.email,
        details=details,
    )

    try:
        response_id = await write_model.submit_rsvp(guest_id, submission)
    except Exception as e:
        raise _upstream_failure("submit", e)

    return RSVPSubmitResponse(
        success=True,
        response_id=response_id,
        message="RSVP submitted successfully",
    )


@router.get(RSVP_URL, response_model=LatestRSVPResponse)
async def get_latest_rsvp(
    event: Wedding,
    guest: SessionGuestDTO = Depends(get_current_guest),
    read_model: RSVPReadModel | None = Depends(get_rsvp_read_model),
) -> LatestRSVPResponse:
    """Latest RSVP for prefilling the form, ``{"rsvp": null}`` when there is none."""
    guest_id = _require_notion_guest(guest, read_model)

    try:
        rsvp = await read_model.get_latest_rsvp(guest_id, event)
    except Exception as e:
        raise _upstream_failure("fetch", e)

    return LatestRSVPResponse(rsvp=RSVPRecordResponse.from_dto(rsvp) if rsvp else None)


@router.delete(RSVP_URL, response_model=RSVPDeleteResponse)
async def delete_rsvp(
    event: Wedding,
    guest: SessionGuestDTO = Depends(get_current_guest),
    write_model: RSVPWriteModel | None = Depends(get_rsvp_write_model),
) -> RSVPDeleteResponse:
    """Archive the latest RSVP, used to test the first-time RSVP flow."""
    guest_id = _require_notion_guest(guest, write_model)

    try:
        deleted = await write_model.delete_rsvp(guest_id, event)
    except Exception as e:
        raise _upstream_failure("delete", e)

    if not deleted:
        raise HTTPException(status_code=404, detail="No RSVP found to delete")
    return RSVPDeleteResponse(success=True, message="RSVP deleted successfully")
