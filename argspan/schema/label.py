from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ConfigDict, JsonValue, field_validator

from argspan.schema.span import Span, SpanText

PROPERTY_TEXT_SPAN = "textSpan"
PROPERTY_LABEL = "label"
PROPERTY_ATTRIBUTES = "attrs"

# Container tags keep an object and a list of pairs apart once frozen
FROZEN_OBJECT = "object"
FROZEN_ARRAY = "array"


def freeze_value(value: Any) -> Any:
    """Turn a JSON value into a hashable equivalent, tagging each container with its kind."""
    if isinstance(value, dict):
        return FROZEN_OBJECT, tuple(sorted((k, freeze_value(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return FROZEN_ARRAY, tuple(freeze_value(v) for v in value)
    return value


def _read_only(*args, **kwargs):
    raise TypeError("Attributes of an immutable label cannot be modified; use thaw() for an editable copy")


class ReadOnlyDict(dict):
    """Dict that refuses in-place changes. Still serializes as a plain JSON object."""

    __setitem__ = __delitem__ = __ior__ = _read_only
    clear = pop = popitem = setdefault = update = _read_only

    def __reduce__(self):
        return type(self), (dict(self),)


class ReadOnlyList(list):
    """List that refuses in-place changes. Still serializes as a plain JSON array."""

    __setitem__ = __delitem__ = __iadd__ = __imul__ = _read_only
    append = clear = extend = insert = pop = remove = reverse = sort = _read_only

    def __reduce__(self):
        return type(self), (list(self),)


def read_only_value(value: Any) -> Any:
    """Deep copy of a JSON value with every container made read-only."""
    if isinstance(value, dict):
        return ReadOnlyDict((k, read_only_value(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ReadOnlyList(read_only_value(v) for v in value)
    return value


class BaseSpanTextLabel(BaseModel):
    """
    A label attached to a span of document text, with optional attributes.

    Two labels are the same node when their span, label and attributes are
    equal. The covered text is carried for display only and takes no part
    in equality or hashing, so re-tokenised text does not split a node.
    Equality holds across the mutable and immutable variants.
    """
    text_span: SpanText = Field(..., alias=PROPERTY_TEXT_SPAN, description="Covered offsets and text")
    label: str = Field(..., alias=PROPERTY_LABEL, description="Annotation label (e.g. 'claim', 'premise')")
    attributes: Optional[Dict[str, JsonValue]] = Field(
        None, alias=PROPERTY_ATTRIBUTES, description="Free-form attributes of the annotation"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "textSpan": {"begin": 0, "end": 24, "text": "Taxes should be lowered"},
                "label": "claim",
                "attrs": {"stance": "for"}
            }
        }
    )

    @classmethod
    def create(
        cls,
        span: Span,
        label: str,
        covered_text: Optional[str] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        return cls(text_span=SpanText.of(span, covered_text), label=label, attributes=attributes)

    @property
    def span(self) -> Span:
        return self.text_span.span

    @property
    def covered_text(self) -> Optional[str]:
        return self.text_span.text

    def get_span(self) -> Span:
        return self.span

    def get_label(self) -> str:
        return self.label

    def get_attributes(self) -> Optional[Dict[str, Any]]:
        return self.attributes

    def identity(self):
        return (
            self.text_span.begin,
            self.text_span.end,
            self.label,
            freeze_value(self.attributes),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseSpanTextLabel):
            return NotImplemented
        return self.identity() == other.identity()

    def __hash__(self) -> int:
        return hash(self.identity())

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(span={self.span!r}, label={self.label!r}, "
            f"attributes={self.attributes!r})"
        )


class SpanTextLabel(BaseSpanTextLabel):
    """
    Immutable label. The attributes are deep-copied at construction into
    read-only containers, so the hash cannot drift while a graph holds the
    label and one instance can sit in several graphs.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("attributes", mode="after")
    @classmethod
    def snapshot_attributes(cls, v):
        return None if v is None else read_only_value(v)

    def thaw(self) -> "MutableSpanTextLabel":
        return MutableSpanTextLabel.model_validate(self.model_dump())


class MutableSpanTextLabel(BaseSpanTextLabel):
    """
    Label that can be corrected after detection and before it is placed in a
    graph. Mutating a label that a graph already holds desynchronises the
    graph's span index and id lookup; call ``freeze()`` first when the graph
    will be shared.
    """

    model_config = ConfigDict(validate_assignment=True)

    def set_span(self, span: Span, covered_text: Optional[str] = None) -> None:
        if covered_text is None and span == self.span:
            covered_text = self.covered_text
        self.text_span = SpanText.of(span, covered_text)

    def set_label(self, label: str) -> None:
        self.label = label

    def set_attributes(self, attributes: Optional[Dict[str, Any]]) -> None:
        self.attributes = attributes

    def freeze(self) -> SpanTextLabel:
        return SpanTextLabel.model_validate(self.model_dump())
