"""
Analysis API
============
Routes used by the frontend.

    POST /api/analyze    — analyze a snippet, always HTTP 200 with an AnalysisResponse
    GET  /api/config     — current routing configuration (apiBase, mode, isDemo)
    GET  /api/languages  — language options for the picker

The AnalysisService is built once per app and stored on app.state.
Analysis failures are reported inside the response body (`error`), not
as HTTP errors; only malformed requests get FastAPI's 422.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from bug_detector.models.finding import AnalysisResponse
from bug_detector.services.analyzer import AnalysisService
from bug_detector.utils.languages import DEFAULT_LANGUAGES, LanguageOption

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


class AnalyzeRequest(BaseModel):
    snippet: str
    language: str = ""


def get_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def analyze_snippet(
    payload: AnalyzeRequest,
    service: AnalysisService = Depends(get_service),
):
    """Analyze a code snippet in the configured mode."""
    result = await service.analyze(payload.snippet, payload.language)
    return result.to_wire()


@router.get("/config")
async def get_config(service: AnalysisService = Depends(get_service)):
    return service.config.as_dict()


@router.get("/languages", response_model=List[LanguageOption])
async def get_languages():
    return DEFAULT_LANGUAGES
