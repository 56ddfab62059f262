"""
Conversational answers grounded in a prior analysis result
"""
import logging
from typing import Iterable, List

from govdoc_backend.models.parts import ChatTurn
from govdoc_backend.models.requests import HistoryTurn
from govdoc_backend.services.prompts import build_chat_instruction

logger = logging.getLogger(__name__)

CHAT_APOLOGY = "죄송합니다. 서버 연결에 실패하여 답변을 드릴 수 없습니다."


def to_chat_turns(history: Iterable[HistoryTurn]) -> List[ChatTurn]:
    """
    Flatten wire history ({role, parts: [{text}]}) into ordered ChatTurns

    Turns with no text are dropped; the model rejects empty parts.
    """
    turns = []
    for turn in history:
        text = "".join(part.text for part in turn.parts)
        if text.strip():
            turns.append(ChatTurn(role=turn.role, text=text))
    return turns


def generate_chat_response(backend, history: List[ChatTurn], message: str, document_context: str) -> str:
    """
    Answer a follow-up question about the analyzed documents

    A fresh session is seeded on every call from the caller's history; nothing
    is kept server side. Backend failures degrade to a fixed apology.

    Args:
        backend: Generative backend
        history: Prior turns, oldest first
        message: New user message
        document_context: Serialized AnalysisResult embedded as ground truth

    Returns:
        Response text
    """
    logger.info(f"[CHAT] Question: {message[:100]} (history: {len(history)} turn(s))")
    system_instruction = build_chat_instruction(document_context)

    try:
        answer = backend.chat(system_instruction, history, message)
    except Exception as e:
        logger.error(f"[CHAT] Chat Error: {e}")
        return CHAT_APOLOGY

    if not answer:
        logger.warning("[CHAT] Empty response from Gemini")
        return CHAT_APOLOGY

    logger.info(f"[CHAT] Generated response ({len(answer)} chars)")
    return answer
