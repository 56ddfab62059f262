"""
Pydantic request/response models
"""
from pydantic import BaseModel, Field
from typing import List, Optional


class FilePayload(BaseModel):
    base64Data: str
    mimeType: str


class AnalyzeRequest(BaseModel):
    # Optional so a missing list is reported as "File data is required" rather than a schema error
    files: Optional[List[FilePayload]] = None


class HistoryPart(BaseModel):
    text: str = ""


class HistoryTurn(BaseModel):
    role: str
    parts: List[HistoryPart] = Field(default_factory=list)


class ChatRequest(BaseModel):
    history: List[HistoryTurn] = Field(default_factory=list)
    message: str
    documentContext: str = ""


class ChatResponse(BaseModel):
    text: str
