from fastapi import APIRouter, Depends

import authentication.auth as auth
import models.schemas as schemas

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=schemas.AuthContext)
def get_current_profile(
    current: schemas.AuthContext = Depends(auth.get_auth_context),
):
    """The caller as the server sees it, with the role from the stored profile."""
    return current
