"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends, Request

from app.services.guest_repository import GuestRepository, get_guest_repository
from app.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    repository = getattr(request.app.state, "guest_repository", None)
    store = type(repository.store).__name__ if repository and repository.store else None
    return {"status": "ok", "store": store}

@router.get("/stats/confirmed")
async def confirmed_count(
    repository: GuestRepository = Depends(get_guest_repository)
):
    """Number of guests who confirmed attendance"""
    count = await repository.get_confirmed_count()

    return success_response(
        message="Confirmed guests counted",
        data={"confirmed": count}
    )
