from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_SCORE = "Unknown"


# ---------- Pipeline values ----------
@dataclass(frozen=True)
class UploadedDocument:
    """Artifact owned by the document store for the length of one request."""

    id: str
    storage_path: Path
    original_name: str
    size_bytes: int
    created_at: datetime


@dataclass(frozen=True)
class ExtractedText:
    content: str

    @property
    def is_empty(self) -> bool:
        return not self.content.strip()


@dataclass(frozen=True)
class JobReference:
    url: str


@dataclass(frozen=True)
class JobDescription:
    text: str


@dataclass(frozen=True)
class AnalysisPrompt:
    text: str
    version: str


@dataclass(frozen=True)
class RawModelReply:
    text: str
    malformed: bool = False


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling and length parameters sent with every model call."""

    temperature: float = 1.0
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 8192
    response_mime_type: str = "text/plain"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "max_output_tokens": self.max_output_tokens,
            "response_mime_type": self.response_mime_type,
        }


# ---------- Result Model ----------
class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: Union[int, Literal["Unknown"]]
    suggestions: str
    ambiguous: bool = Field(default=False, exclude=True)


# ---------- Error Model ----------
class ErrorResponse(BaseModel):
    error: str

