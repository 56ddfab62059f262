"""
Analysis endpoint
"""
import asyncio
import logging

from fastapi import APIRouter, Request

from govdoc_backend.errors import GenerationError, ValidationError
from govdoc_backend.models.requests import AnalyzeRequest
from govdoc_backend.services.analysis_service import FILES_REQUIRED_MESSAGE, decode_files, run_analysis

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_BACKEND_MESSAGE = "GEMINI_API_KEY가 설정되지 않아 AI 분석을 수행할 수 없습니다."


@router.post("/api/analyze")
async def analyze_document(request: AnalyzeRequest, http_request: Request):
    """
    Analyze one or more administrative documents

    Args:
        files: [{base64Data, mimeType}, ...] in display order

    Returns:
        AnalysisResult: summary, documentType, sentiment, actions, keyTerms
    """
    if not request.files:
        raise ValidationError(FILES_REQUIRED_MESSAGE)

    files = decode_files(request.files)

    state = http_request.app.state
    if state.backend is None:
        raise GenerationError(MISSING_BACKEND_MESSAGE)

    # Extraction and the Gemini call block; keep them off the event loop
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, run_analysis, files, state.backend, state.normalizer)
    return result.to_response()
