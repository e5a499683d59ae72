# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Problem records and the per-unit collector.

A Problem is what the verifier reports: a message plus the span a host
should underline. Severity is always "error" for the core rules; the
field exists so hosts can render uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from .span import Span


@dataclass
class Problem:
	"""Represents one verification error."""

	message: str
	span: Span = field(default_factory=Span)  # Span() denotes an unknown location.
	severity: str = "error"
	code: str | None = None
	# Front-end phase label, set only for problems that do not come from the
	# verifier itself (e.g. sketch syntax errors surfaced by the CLI).
	phase: str | None = None
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


class ProblemSink:
	"""
	Append-only, ordered problem collector for one compilation unit.

	Insertion order follows traversal order. Nothing is sorted or
	deduplicated: two claims that reject the same field report it twice.
	"""

	def __init__(self, problems: Iterable[Problem] | None = None) -> None:
		self._problems: List[Problem] = list(problems or [])

	def add(self, problem: Problem) -> None:
		self._problems.append(problem)

	def error(self, message: str, span: Span | None = None, *, code: str | None = None) -> Problem:
		problem = Problem(message=message, span=span or Span(), code=code)
		self._problems.append(problem)
		return problem

	def extend(self, problems: Iterable[Problem]) -> None:
		self._problems.extend(problems)

	@property
	def problems(self) -> Tuple[Problem, ...]:
		return tuple(self._problems)

	def __iter__(self) -> Iterator[Problem]:
		return iter(tuple(self._problems))

	def __len__(self) -> int:
		return len(self._problems)

	def __bool__(self) -> bool:
		return bool(self._problems)


__all__ = ["Problem", "ProblemSink"]
