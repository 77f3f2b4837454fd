"""Module: health."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from petcare.api.v1.routes.deps import get_db

router = APIRouter()


# Endpoint: lightweight health probe for service liveness.
@router.get("/health", summary="Health check")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok"}
