from fastapi import APIRouter, Depends

from hrforms.core.security import get_current_user


router = APIRouter(prefix="/me", tags=["me"])


@router.get("")
async def who_am_i(current_user=Depends(get_current_user)):
    # user_code is what gets stamped into Entered_By on submit
    return {"user": current_user}
