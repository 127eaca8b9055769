"""
Conversion from host framework annotations to TextSpanAnnotation records.

A host annotation is any object exposing ``begin`` and ``end`` offsets, a
type and its covered text. Type names may be fully qualified
(``de.example.types.Claim``); only the short name after the last dot is kept.
"""
from typing import Any, Iterable, List

from argspan.schema.annotation import TextSpanAnnotation


def short_type_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]


def _type_name(annotation: Any) -> str:
    type_name = getattr(annotation, "type_name", None)
    if type_name is None:
        annotation_type = getattr(annotation, "type", None)
        if annotation_type is None:
            raise AttributeError(f"Host annotation has no type: {annotation!r}")
        type_name = annotation_type if isinstance(annotation_type, str) else getattr(annotation_type, "name")
    return short_type_name(type_name)


def _covered_text(annotation: Any):
    covered_text = getattr(annotation, "covered_text", None)
    if callable(covered_text):
        covered_text = covered_text()
    return covered_text


def from_host_annotation(annotation: Any) -> TextSpanAnnotation:
    return TextSpanAnnotation(
        begin=annotation.begin,
        end=annotation.end,
        label=_type_name(annotation),
        covered_text=_covered_text(annotation),
    )


def from_host_annotations(annotations: Iterable[Any]) -> List[TextSpanAnnotation]:
    return [from_host_annotation(a) for a in annotations]
