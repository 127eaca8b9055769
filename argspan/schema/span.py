from functools import total_ordering
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator


@total_ordering
class Span(BaseModel):
    begin: int = Field(..., ge=0, description="Offset of the first covered character")
    end: int = Field(..., ge=0, description="Offset one past the last covered character")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "begin": 0,
                "end": 5
            }
        }
    )

    @model_validator(mode="after")
    def check_order(self) -> "Span":
        if self.begin > self.end:
            raise ValueError(f"Span begin {self.begin} is after end {self.end}")
        return self

    def __lt__(self, other: "Span") -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return (self.begin, self.end) < (other.begin, other.end)

    @property
    def length(self) -> int:
        return self.end - self.begin

    def __len__(self) -> int:
        return self.length

    def __bool__(self) -> bool:
        # an empty span is still a span
        return True

    def contains(self, other: "Span") -> bool:
        return self.begin <= other.begin and other.end <= self.end

    def as_tuple(self):
        return self.begin, self.end

    def __repr__(self) -> str:
        return f"Span[{self.begin}, {self.end})"


class SpanText(BaseModel):
    """
    Wire form of a labelled span: the offsets plus the text they cover.

    The covered text is display data only; labels compare and hash on
    ``span`` and never look at ``text``.
    """
    begin: int = Field(..., ge=0, description="Offset of the first covered character")
    end: int = Field(..., ge=0, description="Offset one past the last covered character")
    text: Optional[str] = Field(None, description="Covered text (for display and debugging)")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "begin": 0,
                "end": 5,
                "text": "Taxes"
            }
        }
    )

    @model_validator(mode="after")
    def check_order(self) -> "SpanText":
        if self.begin > self.end:
            raise ValueError(f"Span begin {self.begin} is after end {self.end}")
        return self

    @property
    def span(self) -> Span:
        return Span(begin=self.begin, end=self.end)

    @classmethod
    def of(cls, span: Span, text: Optional[str] = None) -> "SpanText":
        return cls(begin=span.begin, end=span.end, text=text)
