"""
Chat endpoint for follow-up questions about an analyzed document
"""
import asyncio
import logging

from fastapi import APIRouter, Request

from govdoc_backend.models.requests import ChatRequest, ChatResponse
from govdoc_backend.services.chat_service import CHAT_APOLOGY, generate_chat_response, to_chat_turns

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, http_request: Request):
    """
    Chat about the analyzed document

    Args:
        history: Prior turns [{role, parts: [{text}]}], supplied by the caller
        message: User's question
        documentContext: Serialized analysis result

    Returns:
        text: AI-generated response (an apology when the backend fails)
    """
    backend = http_request.app.state.backend
    if backend is None:
        logger.error("[CHAT] No Gemini backend configured")
        return ChatResponse(text=CHAT_APOLOGY)

    loop = asyncio.get_running_loop()
    answer = await loop.run_in_executor(
        None,
        generate_chat_response,
        backend,
        to_chat_turns(request.history),
        request.message,
        request.documentContext,
    )
    return ChatResponse(text=answer)
