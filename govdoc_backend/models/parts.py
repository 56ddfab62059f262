"""
Request-scoped content units handed to the generative backend
"""
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class UploadedFile:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class InlineBinaryPart:
    """Image/PDF passed through for native multimodal understanding"""
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class TextPart:
    """Extracted or decoded text, tagged with where it came from (HWP/DOCX/Text)"""
    content: str
    source_label: str = ""

    def render(self) -> str:
        if not self.source_label:
            return self.content
        return f"\n[Document Content ({self.source_label})]: \n{self.content}\n"


Part = Union[InlineBinaryPart, TextPart]


@dataclass(frozen=True)
class ChatTurn:
    role: str  # "user" or "model"
    text: str


# Instruction part first, then document parts in submission order
AnalysisRequest = List[Part]
