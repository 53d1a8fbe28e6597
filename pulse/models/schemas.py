from pydantic import BaseModel, Field


class IngestedItem(BaseModel):
    id: str
    title: str = Field(min_length=1)
    url: str | None = None
    source: str
    ts: int | None = None


class IngestSummary(BaseModel):
    pulled: int
    saved: int
    at: str
    per_source: dict[str, int] = {}
    failed: list[str] = []
