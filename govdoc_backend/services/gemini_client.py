"""
Gemini client for schema-constrained analysis and search-augmented chat
"""
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from govdoc_backend.config import ANALYSIS_TEMPERATURE, DEFAULT_MODEL, Settings
from govdoc_backend.errors import GenerationError
from govdoc_backend.models.parts import AnalysisRequest, ChatTurn, InlineBinaryPart, Part

logger = logging.getLogger(__name__)


def extract_response_text(response) -> Optional[str]:
    """Pull the text out of a generate_content response, tolerating odd shapes"""
    try:
        if getattr(response, "text", None):
            return response.text.strip()
    except (AttributeError, ValueError):
        pass

    # Try the candidate parts directly
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [p.text for p in parts if getattr(p, "text", None)]
        if texts:
            return "".join(texts).strip()
    return None


def to_gemini_part(part: Part) -> types.Part:
    if isinstance(part, InlineBinaryPart):
        return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
    return types.Part.from_text(text=part.render())


class GeminiBackend:
    """
    Generative backend built on google-genai

    Constructed once and passed into the app; holds no request state.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: str = DEFAULT_MODEL,
                 client: Optional[genai.Client] = None):
        if client is None:
            if not api_key:
                raise ValueError("GEMINI_API_KEY environment variable not set")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model_name = model_name

    def generate_structured(self, parts: List[Part], schema: dict,
                            temperature: float = ANALYSIS_TEMPERATURE) -> Optional[str]:
        """
        Single-turn generation constrained to a JSON schema

        Args:
            parts: Ordered parts, instruction first
            schema: Response schema the output must match
            temperature: Sampling temperature

        Returns:
            Raw response text, or None when the model returned nothing
        """
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=[types.Content(role="user", parts=[to_gemini_part(p) for p in parts])],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
                temperature=temperature,
            ),
        )
        return extract_response_text(response)

    def chat(self, system_instruction: str, history: List[ChatTurn], message: str) -> Optional[str]:
        """
        One conversational turn with Google Search enabled

        A new chat session is built from the caller's history on every call.
        """
        chat = self.client.chats.create(
            model=self.model_name,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                tools=[types.Tool(google_search=types.GoogleSearch())],
            ),
            history=[
                types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
                for turn in history
            ],
        )
        response = chat.send_message(message)
        return extract_response_text(response)


def initialize_gemini(settings: Settings) -> GeminiBackend:
    """Initialize the Gemini backend with the API key from settings"""
    logger.info(f"[OK] Using Gemini model: {settings.gemini_model}")
    return GeminiBackend(api_key=settings.gemini_api_key, model_name=settings.gemini_model)


def generate_analysis_text(backend, request: AnalysisRequest, schema: dict) -> str:
    """
    Invoke the backend once for an analysis request

    Raises:
        GenerationError: backend failure or empty output (never retried)
    """
    logger.info(f"[ANALYZE] Sending request to Gemini ({len(request)} parts)...")
    try:
        text = backend.generate_structured(request, schema, temperature=ANALYSIS_TEMPERATURE)
    except Exception as e:
        logger.error(f"[ERROR] Gemini API error: {e}")
        raise GenerationError(f"AI 분석 요청에 실패했습니다: {e}")

    if not text:
        raise GenerationError("AI가 응답을 반환하지 않았습니다 (No content).")

    logger.info("[ANALYZE] Gemini response received.")
    return text
