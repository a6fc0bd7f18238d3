"""
Building project routes.

  POST /api/projects/analyze-plot — read plot dimensions off a site photo
  POST /api/projects/synthesize   — generate and store a project record
  GET  /api/projects              — the caller's own projects
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from schemas import (
    PlotAnalysisRequest,
    PlotAnalysisResponse,
    ProjectRecord,
    ProjectSynthesisRequest,
    User,
)
from services.errors import DuplicateSynthesisError, GatewayError, SynthesisCancelled, ValidationError
from services.generation_gateway import GenerationGateway
from services.geometry import apply_plot_analysis
from services.inflight import InFlightRegistry
from services.record_store import CollectionKind, RecordStore
from services.synthesis import SynthesisOrchestrator
from routes.deps import get_current_user, get_gateway, get_record_store, get_registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.post("/analyze-plot", response_model=PlotAnalysisResponse)
async def analyze_plot(
    data: PlotAnalysisRequest,
    user: User = Depends(get_current_user),
    gateway: GenerationGateway = Depends(get_gateway),
):
    """
    Estimate plot dimensions from a photo and merge them into the current
    form values. Fields the analysis could not read keep their value.
    """
    try:
        analysis = await gateway.analyze_plot_image(data.image)
    except GatewayError as e:
        logger.warning(f"Plot analysis failed for {user.id}: {e}")
        raise HTTPException(status_code=502, detail="Plot analysis failed. Please enter the dimensions manually.")

    return PlotAnalysisResponse(
        analysis=analysis,
        dimensions=apply_plot_analysis(data.current, analysis),
    )


@router.post("/synthesize", response_model=ProjectRecord)
async def synthesize_project(
    data: ProjectSynthesisRequest,
    user: User = Depends(get_current_user),
    gateway: GenerationGateway = Depends(get_gateway),
    store: RecordStore = Depends(get_record_store),
    registry: InFlightRegistry = Depends(get_registry),
):
    """Generate renders, analysis and budget for a building and store the record."""
    orchestrator = SynthesisOrchestrator(gateway, store, registry)
    try:
        return await orchestrator.synthesize(data.draft, data.base_image, user, data.language)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (DuplicateSynthesisError, SynthesisCancelled) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GatewayError:
        raise HTTPException(status_code=502, detail="Synthesis failed. Please try again.")


@router.get("", response_model=List[ProjectRecord])
async def list_my_projects(
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store),
):
    """The signed-in user's own projects, most recent first."""
    return await store.filter_by_client(CollectionKind.PROJECTS, user.id)
