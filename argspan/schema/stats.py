from pydantic import BaseModel, Field, ConfigDict


class GraphStats(BaseModel):
    """Summary of a graph building run."""
    documents: int = Field(default=0, ge=0, description="Documents read from the input")
    graphs: int = Field(default=0, ge=0, description="Graphs built and written")
    invalid: int = Field(default=0, ge=0, description="Documents skipped because they could not be built")
    nodes: int = Field(default=0, ge=0, description="Total span labels across all graphs")
    relations: int = Field(default=0, ge=0, description="Total relations across all graphs")
    labels: dict = Field(default_factory=dict, description="Node count per label")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "documents": 12,
                "graphs": 11,
                "invalid": 1,
                "nodes": 87,
                "relations": 54,
                "labels": {"claim": 30, "premise": 57}
            }
        }
    )
