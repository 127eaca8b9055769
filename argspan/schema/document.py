from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, ConfigDict

from argspan.schema.label import BaseSpanTextLabel

PROPERTY_SPAN_ANNOTATIONS = "spanAnnotations"
PROPERTY_RELATIONS = "relations"

LabelT = TypeVar("LabelT", bound=BaseSpanTextLabel)


class GraphDocument(BaseModel, Generic[LabelT]):
    """
    Interchange form of a span annotation graph.

    ``relations[i]`` is the id of the node that node ``i`` points at, or -1
    when node ``i`` has no outgoing relation. Length agreement between the two
    arrays is checked when the graph is rebuilt, not here.
    """
    span_annotations: List[LabelT] = Field(
        ..., alias=PROPERTY_SPAN_ANNOTATIONS, description="Span labels in node id order"
    )
    relations: List[int] = Field(..., alias=PROPERTY_RELATIONS, description="Relation target id per node, -1 for none")
    doc_id: Optional[str] = Field(None, description="Identifier of the annotated document, if known")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "spanAnnotations": [
                    {"textSpan": {"begin": 0, "end": 5, "text": "Taxes"}, "label": "claim", "attrs": None},
                    {"textSpan": {"begin": 6, "end": 10, "text": "hurt"}, "label": "evidence", "attrs": None}
                ],
                "relations": [1, -1]
            }
        }
    )
