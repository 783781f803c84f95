"""
Guest-facing RSVP routes
"""

from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, Request

from app.schemas.guest import CompanionUpdate, GuestResponse, LookupRequest, MasterGuestEntry, RSVPRequest
from app.services.guest_repository import GuestRepository, get_guest_repository
from app.services.matching import LookupStatus
from app.services.messages import generar_mensaje_confirmacion
from app.utils.security import rate_limit_check, get_client_ip
from app.utils.responses import success_response, error_response, rate_limit_error

router = APIRouter()

def guest_data(guest: Dict[str, Any]) -> Dict[str, Any]:
    return GuestResponse.model_validate(guest).model_dump(by_alias=True)

@router.post("")
async def submit_rsvp(
    request: Request,
    rsvp: RSVPRequest,
    repository: GuestRepository = Depends(get_guest_repository)
):
    """Record a new RSVP"""
    if not rate_limit_check(get_client_ip(request)):
        return rate_limit_error()

    guest = await repository.add_guest(rsvp.name, rsvp.attendance)

    return success_response(
        message="RSVP recorded",
        data=guest_data(guest),
        status_code=201
    )

@router.put("/{guest_id}")
async def update_rsvp(
    request: Request,
    guest_id: Union[int, str],
    rsvp: RSVPRequest,
    repository: GuestRepository = Depends(get_guest_repository)
):
    """Resubmit an RSVP by id"""
    if not rate_limit_check(get_client_ip(request)):
        return rate_limit_error()

    guest = await repository.update_guest(guest_id, rsvp.name, rsvp.attendance)

    return success_response(
        message="RSVP updated",
        data=guest_data(guest)
    )

@router.post("/lookup")
async def lookup_rsvp(
    request: Request,
    lookup_data: LookupRequest,
    repository: GuestRepository = Depends(get_guest_repository)
):
    """Find an existing RSVP by name"""
    if not rate_limit_check(get_client_ip(request)):
        return rate_limit_error()

    guest = await repository.find_guest_by_name(lookup_data.name)

    if not guest:
        return error_response(
            message="No RSVP found under that name.",
            status_code=404
        )

    return success_response(
        message="RSVP found",
        data=guest_data(guest)
    )

@router.post("/invitacion")
async def lookup_invitation(
    request: Request,
    lookup_data: LookupRequest,
    repository: GuestRepository = Depends(get_guest_repository)
):
    """Look the name up in the master guest list"""
    if not rate_limit_check(get_client_ip(request)):
        return rate_limit_error()

    result = await repository.lookup_invitado_maestro(lookup_data.name)

    if result.status == LookupStatus.ERROR:
        return error_response(
            message="Could not check the guest list right now. Please try again later.",
            error_code="store_error",
            status_code=503
        )
    if result.status == LookupStatus.NOT_FOUND:
        return error_response(
            message="Name not found in the guest list. Please check the spelling or contact the couple.",
            status_code=404
        )

    entry = MasterGuestEntry.model_validate(result.entry)
    return success_response(
        message="Invitation found",
        data={
            "invitado": entry.model_dump(),
            "mensaje_confirmacion": generar_mensaje_confirmacion(entry.name, entry.pases),
            "match": result.strategy
        }
    )

@router.patch("/{guest_id}/acompanantes")
async def update_companions(
    request: Request,
    guest_id: Union[int, str],
    update: CompanionUpdate,
    repository: GuestRepository = Depends(get_guest_repository)
):
    """Lower the number of companions"""
    if not rate_limit_check(get_client_ip(request)):
        return rate_limit_error()

    guest = await repository.update_cantidad_acompanantes(guest_id, update.cantidad)

    return success_response(
        message="Companions updated",
        data=guest_data(guest)
    )
