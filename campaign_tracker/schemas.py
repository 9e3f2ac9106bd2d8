from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, Union

Amount = Union[int, float]

class ResultPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_raised: Amount = Field(description="Amount raised so far")
    total_raised_display: str = Field(description="Whole-dollar display string, e.g. $186,576")
    goal: Amount
    goal_display: str
    progress_pct: float = Field(description="total_raised / goal * 100, rounded to 2 decimals")
    updated_at: str = Field(description="ISO 8601 UTC timestamp of the successful fetch")
    source: str = Field(description="Campaign page URL")
    method: str = Field(description="Heuristic that produced total_raised")
    stale: bool = False
    note: Optional[str] = None

class ErrorPayload(BaseModel):
    error: str
    details: Optional[str] = None
