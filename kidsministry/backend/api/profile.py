from fastapi import APIRouter, Depends, HTTPException, status

from .schemas.session import ProfilePicture
from .auth import require_session
from .dependencies import get_app_state
from ..services.app_state import AppState

router = APIRouter(prefix="/profile", tags=["Profile"], dependencies=[Depends(require_session)])


@router.get("/picture", response_model=ProfilePicture)
async def get_profile_picture(state: AppState = Depends(get_app_state)):
    return ProfilePicture(picture=await state.profile_picture_slot.load())


@router.put("/picture", response_model=ProfilePicture)
async def set_profile_picture(picture: ProfilePicture, state: AppState = Depends(get_app_state)):
    if not await state.profile_picture_slot.save(picture.picture):
        raise HTTPException(status_code=status.HTTP_507_INSUFFICIENT_STORAGE, detail="The profile picture could not be stored.")
    return picture
