# controllers/admin.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import require_admin
from ..dependencies import get_db
from ..schemas.analytics import AdminAnalytics
from ..schemas.user import CurrentUser
from ..services.analytics import admin_analytics

router = APIRouter()


@router.get("/analytics", response_model=AdminAnalytics, summary="System-wide usage analytics")
def analytics(
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    return admin_analytics(db)
