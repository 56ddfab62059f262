"""
DOCX text extraction with python-docx
"""
import io
import logging
from typing import List

from docx import Document

from govdoc_backend.errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_text_from_docx(data: bytes) -> str:
    """
    Extract raw text from a DOCX document: paragraphs first, then table rows

    Raises:
        ExtractionError: the container or its body XML is unreadable
    """
    # python-docx parses lazily, so malformed body XML only surfaces during the walk
    try:
        doc = Document(io.BytesIO(data))
        parts: List[str] = [p.text for p in doc.paragraphs if p.text.strip()]

        for table in doc.tables:
            parts.append("")
            for row in table.rows:
                cells = [" ".join(cell.text.split()) for cell in row.cells]
                parts.append(" | ".join(cells))
    except Exception as e:
        logger.error(f"[DOCX] python-docx error: {e}")
        raise ExtractionError(f"DOCX 텍스트 추출 실패: {e}")

    text = "\n".join(parts)
    logger.info(f"[DOCX] Extracted {len(text)} characters")
    return text
