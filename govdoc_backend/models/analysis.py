"""
Structured analysis result returned by /api/analyze
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Sentiment(str, Enum):
    URGENT = "URGENT"
    NEUTRAL = "NEUTRAL"
    GOOD_NEWS = "GOOD_NEWS"


class ActionPriority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ActionItem(BaseModel):
    """One distinct obligation found in the documents"""
    description: str
    # YYYY-MM-DD, "Immediately", or null
    deadline: Optional[str] = None
    amount: Optional[str] = None
    # Where to pay or submit
    recipient: Optional[str] = None
    priority: ActionPriority


class KeyTerm(BaseModel):
    term: str
    definition: str


class AnalysisResult(BaseModel):
    summary: str
    documentType: str
    sentiment: Sentiment
    actions: List[ActionItem] = Field(default_factory=list)
    keyTerms: List[KeyTerm] = Field(default_factory=list)

    @field_validator("actions", "keyTerms", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        # A null list means nothing was detected
        return [] if value is None else value

    def to_response(self) -> dict:
        """Serialize for the wire; nullable fields stay as explicit nulls"""
        return self.model_dump(mode="json")
