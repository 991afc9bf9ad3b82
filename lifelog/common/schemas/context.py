"""
Answer-layer Schemas

Shapes handed to the downstream LLM collaborator. Both the direct path and
the vector path produce the same SourceItem / AssembledContext shapes so the
answer layer never needs to know which path ran.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceItem(BaseModel):
    """Provenance record for one piece of personal data"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str = Field(..., description="Data type, e.g. 'voice' or 'location'")
    snippet: str = Field(default="", description="One-line preview")
    score: float = Field(default=1.0, description="Similarity, or 1.0 for direct results")
    source_id: str = Field(default="", alias="sourceId")
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class RoutingMetadata(BaseModel):
    """Tells the answer layer how the context was produced"""
    model_config = ConfigDict(populate_by_name=True)

    was_direct_query: bool = Field(..., alias="wasDirectQuery")
    direct_query_type: Optional[str] = Field(default=None, alias="directQueryType")
    exact_value: Optional[Any] = Field(default=None, alias="exactValue")
    strategy: str
    data_type: Optional[str] = Field(default=None, alias="dataType")
    language: Optional[str] = None


class AssembledContext(BaseModel):
    """Bounded context + sources + routing for the answer layer"""
    text: str
    sources: List[SourceItem] = Field(default_factory=list)
    routing: RoutingMetadata

    def to_payload(self) -> dict:
        """Wire form with camelCase keys, as consumed by the chat endpoint"""
        return {
            "context": self.text,
            "sources": [s.model_dump(by_alias=True) for s in self.sources],
            "routing": self.routing.model_dump(by_alias=True),
        }
