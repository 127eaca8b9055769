from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, Field, ConfigDict, model_validator

from argspan.schema.label import BaseSpanTextLabel, SpanTextLabel
from argspan.schema.span import Span, SpanText


class TextSpanAnnotation(BaseModel):
    """Plain span annotation produced from a host framework's annotation object."""
    begin: int = Field(..., ge=0, description="Character offset where the annotation starts")
    end: int = Field(..., ge=0, description="Character offset one past the annotation's end")
    label: str = Field(..., description="Short name of the host annotation type")
    covered_text: Optional[str] = Field(None, description="Text covered by the annotation")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "begin": 25,
                "end": 61,
                "label": "Premise",
                "covered_text": "because it would boost consumption"
            }
        }
    )

    @model_validator(mode="after")
    def check_order(self) -> "TextSpanAnnotation":
        if self.begin > self.end:
            raise ValueError(f"Annotation begin {self.begin} is after end {self.end}")
        return self

    @property
    def span(self) -> Span:
        return Span(begin=self.begin, end=self.end)

    def to_label(
        self,
        attributes: Optional[Dict[str, Any]] = None,
        label_type: Type[BaseSpanTextLabel] = SpanTextLabel,
    ) -> BaseSpanTextLabel:
        return label_type(
            text_span=SpanText(begin=self.begin, end=self.end, text=self.covered_text),
            label=self.label,
            attributes=attributes,
        )
