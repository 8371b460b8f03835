"""
Schemas for batch transforms
"""

from datetime import datetime
from typing import List, Tuple
from pydantic import BaseModel, Field


class BatchReport(BaseModel):
    """Outcome of a batch run over a directory or a set of masks"""
    task: str
    processed: List[str] = Field(default_factory=list)
    failed: List[Tuple[str, str]] = Field(default_factory=list)  # (file, error)
    processing_time: float = 0.0  # seconds
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total(self) -> int:
        return len(self.processed) + len(self.failed)

    @property
    def succeeded(self) -> bool:
        return not self.failed
