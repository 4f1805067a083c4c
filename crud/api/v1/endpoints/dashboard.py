from datetime import date
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List
from auth import AuthContext, get_auth_context, require_admin
from database import get_db
from schemas.dashboard import DashboardOverview, RevenuePoint
from crud import dashboard

router = APIRouter()

@router.get("/", response_model=DashboardOverview)
def get_dashboard_overview(db: Session = Depends(get_db), _: AuthContext = Depends(get_auth_context)):
    """
    Dashboard overview:
    - item kinds, stock, active and overdue rental counts
    - most rented items right now
    - top spending customers this year
    - the most overdue rentals
    """
    return dashboard.get_dashboard_data(db)

@router.get("/revenue", response_model=List[RevenuePoint])
def get_revenue(
    view: str = Query("month", pattern="^(week|month|year)$", description="Bucket size for the revenue series"),
    db: Session = Depends(get_db),
    _: AuthContext = Depends(get_auth_context),
):
    return dashboard.get_revenue_series(db, view)

@router.get("/export")
def export_rentals(db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    content = dashboard.generate_rentals_excel(db)
    filename = f"rentals-{date.today().isoformat()}.xlsx"
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
