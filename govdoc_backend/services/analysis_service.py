"""
Document analysis service - normalize, prompt, generate, parse
"""
import base64
import binascii
import logging
from typing import Iterable, List

from govdoc_backend.errors import ValidationError
from govdoc_backend.extraction.normalizer import FormatNormalizer
from govdoc_backend.models.analysis import AnalysisResult
from govdoc_backend.models.parts import UploadedFile
from govdoc_backend.models.requests import FilePayload
from govdoc_backend.services.gemini_client import generate_analysis_text
from govdoc_backend.services.prompts import ANALYSIS_SCHEMA, build_analysis_request
from govdoc_backend.utils.json_repair import parse_analysis_result

logger = logging.getLogger(__name__)

FILES_REQUIRED_MESSAGE = "File data is required"


def decode_files(payloads: Iterable[FilePayload]) -> List[UploadedFile]:
    """
    Decode wire payloads into UploadedFiles, preserving order

    Raises:
        ValidationError: a payload is not valid base64
    """
    files = []
    for index, payload in enumerate(payloads):
        try:
            data = base64.b64decode(payload.base64Data)
        except (binascii.Error, ValueError):
            raise ValidationError(f"Invalid base64 data for file #{index + 1}")
        files.append(UploadedFile(data=data, mime_type=payload.mimeType))
    return files


def run_analysis(files: List[UploadedFile], backend, normalizer: FormatNormalizer) -> AnalysisResult:
    """
    Run the full analysis pipeline for one request

    Args:
        files: Uploaded files in submission order
        backend: Generative backend (GeminiBackend or a substitute)
        normalizer: Format normalizer configured for this deployment

    Returns:
        Validated AnalysisResult

    Raises:
        ValidationError: no files
        ExtractionError: HWP/DOCX extraction failed (no partial result)
        GenerationError: the model returned nothing
        ParseError: the output could not be parsed or validated
    """
    if not files:
        raise ValidationError(FILES_REQUIRED_MESSAGE)

    logger.info(f"[ANALYZE] Processing {len(files)} file(s)")

    # 1. Normalize files sequentially; order is reproduced in the prompt
    parts = normalizer.normalize_all(files)
    if not parts:
        logger.warning("[WARN] No supported files in batch, sending instruction only")

    # 2. Construct prompt
    request = build_analysis_request(parts)

    # 3. Call Gemini
    text = generate_analysis_text(backend, request, ANALYSIS_SCHEMA)

    # 4. Repair and parse
    result = parse_analysis_result(text)
    logger.info(
        f"[ANALYZE] Analysis complete: {result.documentType} "
        f"({result.sentiment.value}, {len(result.actions)} action(s))"
    )
    return result
