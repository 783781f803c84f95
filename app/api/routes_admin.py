"""
Admin API routes - requires authentication
"""

from typing import Union

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.routes_guest import guest_data
from app.services.excel_service import ExcelService
from app.services.guest_repository import GuestRepository, get_guest_repository
from app.utils.security import verify_admin_token
from app.utils.responses import success_response

router = APIRouter()

@router.get("/guests")
async def list_guests(
    repository: GuestRepository = Depends(get_guest_repository),
    token: str = Depends(verify_admin_token)
):
    """List every RSVP, newest first"""
    guests = await repository.get_all_guests()

    return success_response(
        message="Guests retrieved successfully",
        data={
            "guests": [guest_data(guest) for guest in guests],
            "total": len(guests)
        }
    )

@router.get("/guests/confirmed")
async def list_confirmed_guests(
    repository: GuestRepository = Depends(get_guest_repository),
    token: str = Depends(verify_admin_token)
):
    """List guests who confirmed attendance"""
    guests = await repository.get_confirmed_guests()

    return success_response(
        message="Confirmed guests retrieved successfully",
        data={
            "guests": [guest_data(guest) for guest in guests],
            "total": len(guests)
        }
    )

@router.get("/guests/export.xlsx")
async def export_guests(
    repository: GuestRepository = Depends(get_guest_repository),
    token: str = Depends(verify_admin_token)
):
    """Export current RSVP data to Excel"""
    guests = await repository.get_all_guests()
    excel_content = ExcelService.export_guests(guests)

    return Response(
        content=excel_content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=rsvp_invitados.xlsx"}
    )

@router.get("/summary")
async def rsvp_summary(
    repository: GuestRepository = Depends(get_guest_repository),
    token: str = Depends(verify_admin_token)
):
    """Totals by attendance"""
    guests = await repository.get_all_guests()

    return success_response(
        message="Summary computed",
        data=ExcelService.summary(guests)
    )

@router.delete("/guests/{guest_id}")
async def delete_guest(
    guest_id: Union[int, str],
    repository: GuestRepository = Depends(get_guest_repository),
    token: str = Depends(verify_admin_token)
):
    """Delete an RSVP"""
    deleted = await repository.delete_guest(guest_id)

    return success_response(
        message="Guest deleted",
        data={"id": guest_id, "deleted": deleted}
    )
