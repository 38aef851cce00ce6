"""
Profile REST endpoints: display name, bio, avatar and onboarding flag.
"""

from fastapi import APIRouter, Depends, Query, Request

from talkitout.api.dependencies import AppServices, get_services
from talkitout.core.models import Profile, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=Profile)
async def get_profile(services: AppServices = Depends(get_services)):
    return await services.profile.get_profile()


@router.put("", response_model=Profile)
async def update_profile(body: ProfileUpdate, services: AppServices = Depends(get_services)):
    """Overwrite the supplied fields; omitted fields are left unchanged."""
    return await services.profile.update_profile(display_name=body.display_name, bio=body.bio)


@router.put("/avatar", response_model=Profile)
async def upload_avatar(
    request: Request,
    filename: str = Query("avatar.jpg"),
    services: AppServices = Depends(get_services),
):
    """Upload the raw request body as the new avatar image."""
    image = await request.body()
    return await services.profile.set_avatar(image, filename)


@router.post("/onboarding", response_model=Profile)
async def complete_onboarding(services: AppServices = Depends(get_services)):
    return await services.profile.complete_onboarding()
