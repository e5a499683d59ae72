# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by problems.

A Span anchors a problem in the source text: a character offset plus a
length (what editors need to underline a range), and best-effort
file/line/column for textual rendering. The `raw` field keeps whatever
location object the front-end handed us.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source range (start offset + length, plus file/line/column when known)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	start: Optional[int] = None
	length: Optional[int] = None
	raw: Any = None

	@property
	def end(self) -> Optional[int]:
		if self.start is None or self.length is None:
			return None
		return self.start + self.length

	def is_known(self) -> bool:
		return self.start is not None or self.line is not None

	def with_file(self, file: Optional[str]) -> "Span":
		if file is None or self.file is not None:
			return self
		return Span(file=file, line=self.line, column=self.column, start=self.start, length=self.length, raw=self.raw)

	@classmethod
	def from_loc(cls, loc: Any) -> "Span":
		"""
		Construct a Span from an existing front-end location object.

		If `loc` is already a Span, it is returned unchanged; otherwise the
		location object is stored in `raw` and common fields are copied over.
		"""
		if loc is None:
			return cls()
		if isinstance(loc, cls):
			return loc
		start = getattr(loc, "start", None)
		if start is None:
			start = getattr(loc, "start_pos", None)
		length = getattr(loc, "length", None)
		end = getattr(loc, "end_pos", None)
		if length is None and start is not None and end is not None:
			length = end - start
		return cls(
			file=getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			start=start,
			length=length,
			raw=loc,
		)


__all__ = ["Span"]
