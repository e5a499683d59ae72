"""
capsafe.core: shared problem/span types used by every verifier pass.

Modules:
  - span: Span (offset/length + best-effort file/line/column)
  - diagnostics: Problem record and the ProblemSink collector
"""

from .diagnostics import Problem, ProblemSink
from .span import Span

__all__ = [
	"Problem",
	"ProblemSink",
	"Span",
]
