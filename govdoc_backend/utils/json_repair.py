"""
Lenient parsing of the model's structured output
"""
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from govdoc_backend.errors import ParseError
from govdoc_backend.models.analysis import AnalysisResult

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "AI 응답을 분석할 수 없습니다 (JSON Parsing Error)."
SCHEMA_ERROR_MESSAGE = "AI 응답 형식이 올바르지 않습니다 (Schema Validation Error)."


def clean_json_string(text: str) -> str:
    """
    Slice from the first '{' to the last '}'

    Text without a usable brace pair is returned unchanged.
    """
    first_open = text.find("{")
    last_close = text.rfind("}")
    if first_open != -1 and last_close != -1 and last_close > first_open:
        return text[first_open:last_close + 1]
    return text


def parse_json_object(text: str) -> dict:
    """
    Repair then strictly parse a JSON object

    Raises:
        ParseError: the repaired text is not a JSON object
    """
    cleaned = clean_json_string(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"[ERROR] JSON Parse Failed ({e}). Raw response: {text}")
        raise ParseError(PARSE_ERROR_MESSAGE)

    if not isinstance(data, dict):
        logger.error(f"[ERROR] Expected a JSON object. Raw response: {text}")
        raise ParseError(PARSE_ERROR_MESSAGE)
    return data


def parse_analysis_result(text: str) -> AnalysisResult:
    """
    Parse model output into a validated AnalysisResult

    Required fields and the closed sentiment/priority enums are checked
    after the syntactic parse succeeds.

    Raises:
        ParseError: unparsable JSON or a schema violation
    """
    data = parse_json_object(text)
    try:
        return AnalysisResult.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"[ERROR] Analysis schema validation failed: {e}. Raw response: {text}")
        raise ParseError(SCHEMA_ERROR_MESSAGE)
