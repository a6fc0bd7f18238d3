"""Dimension reconciliation route used by the building and room forms."""

from fastapi import APIRouter

from schemas import Dimensions, ReconcileRequest
from services.geometry import reconcile

router = APIRouter(prefix="/api/geometry", tags=["geometry"])


@router.post("/reconcile", response_model=Dimensions)
async def reconcile_dimensions(data: ReconcileRequest):
    """
    Apply one edited field (length, breadth or area) and return the
    consistent triple.
    """
    return reconcile(data.current, data.field, data.value)
