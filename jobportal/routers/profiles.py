# 🔹 FILE: jobportal/routers/profiles.py
from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import get_current_profile
from ..models import Profile

router = APIRouter()

@router.get("/me", response_model=schemas.ProfileOut)
def my_profile(profile: Profile = Depends(get_current_profile)):
    return profile
