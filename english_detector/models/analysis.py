"""Language analysis data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class AnalysisResult:
    """English percentage computed for a single session."""
    session_id: str
    percent: Optional[int]
    analyzed_at: datetime = field(default_factory=datetime.now)
    remote_call: bool = True  # False when the empty-transcript shortcut was taken


class AnalysisResponse(BaseModel):
    """Success body returned by the analysis endpoint.

    Strict mode keeps numeric strings and booleans from passing as a percent.
    """
    model_config = ConfigDict(strict=True, extra="ignore")

    percent: float = Field(allow_inf_nan=False)
