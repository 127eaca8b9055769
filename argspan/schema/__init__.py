from .span import Span, SpanText
from .label import BaseSpanTextLabel, SpanTextLabel, MutableSpanTextLabel
from .annotation import TextSpanAnnotation
from .document import GraphDocument
from .stats import GraphStats
