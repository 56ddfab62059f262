"""
Maps uploaded files to model input parts

Classification is an ordered first-match over the declared media type:
  1. application/pdf, image/*        -> inline binary (native multimodal input)
  2. *hwp* / *hancom*                -> text via hwp5txt
  3. *word* / *officedocument*       -> text via python-docx
  4. text/*                          -> UTF-8 decoded text
  5. anything else                   -> skipped with a warning
"""
import logging
from enum import Enum
from typing import Iterable, List, Optional

from govdoc_backend.errors import ExtractionError
from govdoc_backend.extraction.docx_extraction import extract_text_from_docx
from govdoc_backend.extraction.hwp_extraction import extract_text_from_hwp
from govdoc_backend.models.parts import InlineBinaryPart, Part, TextPart, UploadedFile

logger = logging.getLogger(__name__)


class MediaClass(str, Enum):
    INLINE_BINARY = "inline_binary"
    HWP = "hwp"
    DOCX = "docx"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


def _base_media_type(mime_type: Optional[str]) -> str:
    # "text/plain; charset=utf-8" -> "text/plain"
    return (mime_type or "").split(";", 1)[0].strip().lower()


def classify_media_type(mime_type: Optional[str]) -> MediaClass:
    """Pure function of the declared media type; first match wins"""
    media_type = _base_media_type(mime_type)

    if media_type == "application/pdf" or media_type.startswith("image/"):
        return MediaClass.INLINE_BINARY
    if "hwp" in media_type or "hancom" in media_type:
        return MediaClass.HWP
    if "word" in media_type or "officedocument" in media_type:
        return MediaClass.DOCX
    if media_type.startswith("text/"):
        return MediaClass.TEXT
    return MediaClass.UNSUPPORTED


class FormatNormalizer:
    """Turns UploadedFiles into Parts, sequentially and in submission order"""

    def __init__(self, hwp_command: str = "hwp5txt", temp_dir: Optional[str] = None):
        self.hwp_command = hwp_command
        self.temp_dir = temp_dir

    def normalize(self, file: UploadedFile) -> Optional[Part]:
        """
        Produce zero or one Part for a single file

        Returns:
            The Part, or None when the media type is unsupported

        Raises:
            ExtractionError: HWP/DOCX extraction failed (fatal for the batch)
        """
        media_class = classify_media_type(file.mime_type)

        if media_class is MediaClass.INLINE_BINARY:
            return InlineBinaryPart(data=file.data, mime_type=_base_media_type(file.mime_type))

        if media_class is MediaClass.HWP:
            try:
                text = extract_text_from_hwp(file.data, command=self.hwp_command, temp_dir=self.temp_dir)
            except ExtractionError as e:
                logger.error(f"[NORMALIZE] HWP extraction error: {e.message}")
                raise ExtractionError(f"HWP 변환 오류: {e.message}")
            return TextPart(content=text, source_label="HWP")

        if media_class is MediaClass.DOCX:
            try:
                text = extract_text_from_docx(file.data)
            except ExtractionError as e:
                logger.error(f"[NORMALIZE] DOCX extraction error: {e.message}")
                raise ExtractionError(f"DOCX 변환 오류: {e.message}")
            return TextPart(content=text, source_label="DOCX")

        if media_class is MediaClass.TEXT:
            return TextPart(content=file.data.decode("utf-8", errors="replace"), source_label="Text")

        logger.warning(f"[WARN] Unsupported file type: {file.mime_type}, skipping.")
        return None

    def normalize_all(self, files: Iterable[UploadedFile]) -> List[Part]:
        """Normalize a batch; the first extraction failure aborts the whole batch"""
        parts: List[Part] = []
        for file in files:
            part = self.normalize(file)
            if part is not None:
                parts.append(part)
        return parts
