from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import models.schemas as schemas
from repositories.database import get_db
from services import StatsService

router = APIRouter(prefix="/home", tags=["home"])


@router.get("", response_model=schemas.HomePage)
def get_home_page(db: Session = Depends(get_db)):
    """Landing page payload: featured ideas, counters and published events."""
    return StatsService.get_home_page(db)
