from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.ichi_state import check_ichi_loaded

router = APIRouter()


@router.get("/health")
def health(db: Session = Depends(get_db)) -> dict:
    return {"status": "ok", "ichi_loaded": check_ichi_loaded(db)}
