# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Verifier driver.

For one compilation unit:

  verify_type(t) for every declared type t
     -> malformed-claim checks (Token/Equatable conflicts)
     -> closure + field verification per minimal structural claim
     -> global static-state rule (own statics final and Powerless)
  check_expressions(unit)
     -> equality / native / package rules

Everything appends to the unit's ProblemSink in traversal order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from capsafe.core.diagnostics import Problem, ProblemSink
from capsafe.model.nodes import CompilationUnit, TypeDecl
from capsafe.model.program import Program
from capsafe.traits.markers import MarkerTrait, minimal_claims
from .closure import find_required_scopes
from .config import VerifierConfig
from .expressions import ExpressionChecker
from .fields import check_static_state, verify_fields
from .hierarchy import TraitOracle

logger = logging.getLogger(__name__)


@dataclass
class UnitResult:
	unit: CompilationUnit
	problems: List[Problem]

	@property
	def ok(self) -> bool:
		return not self.problems


class Verifier:
	"""
	Checks compilation units of a Program against the safe subset.

	Holds no state between calls beyond the (read-only) program and config,
	so one instance may serve several units, including from several threads.
	"""

	def __init__(self, program: Program, config: Optional[VerifierConfig] = None) -> None:
		self.program = program
		self.config = config or VerifierConfig()
		self.oracle = TraitOracle(program, self.config.honoraries)

	def verify_unit(self, unit: CompilationUnit) -> List[Problem]:
		logger.debug("verifying unit %s (%d types)", unit.path or "<memory>", len(unit.types))
		sink = ProblemSink()
		for decl in unit.types:
			self.verify_type(decl, sink=sink)
		self.check_expressions(unit, sink=sink)
		problems = list(sink)
		if unit.path is not None:
			for problem in problems:
				problem.span = problem.span.with_file(unit.path)
		return problems

	def verify_units(self, units: Iterable[CompilationUnit]) -> List[UnitResult]:
		return [UnitResult(unit=u, problems=self.verify_unit(u)) for u in units]

	def verify_type(self, decl: TypeDecl, *, sink: Optional[ProblemSink] = None) -> List[Problem]:
		out = sink if sink is not None else ProblemSink()
		start = len(out)
		if decl.is_builtin:
			return []
		if decl.is_interface:
			# Interface fields are implicitly static final; only the global rule applies.
			logger.debug("%s is an interface; checking static state only", decl.name)
			if self.config.check_static_state:
				out.extend(check_static_state(self.oracle, decl))
			return list(out.problems[start:])
		logger.debug("analyzing %s", decl.name)

		effective = self.oracle.effective_traits(decl)
		honorary = self.config.honoraries.traits_of(decl.name)
		claims = minimal_claims(t for t in effective if t not in honorary)

		self._check_claim_conflicts(decl, effective - honorary, out)
		for trait in claims:
			out.extend(self.verify_trait(decl, trait))
		# A Powerless claim already checks every static field against Powerless.
		if self.config.check_static_state and MarkerTrait.POWERLESS not in claims:
			out.extend(check_static_state(self.oracle, decl, under_claim=bool(claims)))
		return list(out.problems[start:])

	def verify_trait(self, decl: TypeDecl, trait: MarkerTrait) -> List[Problem]:
		"""Prove one structural claim of `decl` (closure + field rules)."""
		if decl.is_interface:
			return []
		closure = find_required_scopes(self.oracle, decl, trait)
		problems: List[Problem] = []
		for edge in closure.unresolved:
			problems.append(
				Problem(
					message=(
						f"Could not resolve {edge.edge} {edge.ref} of {edge.owner.simple_name} "
						f"in {trait.label} class {decl.simple_name}"
					),
					span=decl.name_span,
					code="E-UNRESOLVED-TYPE",
				)
			)
		problems.extend(verify_fields(self.oracle, closure.scopes, trait, decl))
		return problems

	def check_expressions(self, unit: CompilationUnit, *, sink: Optional[ProblemSink] = None) -> List[Problem]:
		out = sink if sink is not None else ProblemSink()
		start = len(out)
		ExpressionChecker(self.oracle, self.config, out).check_unit(unit)
		return list(out.problems[start:])

	def _check_claim_conflicts(self, decl: TypeDecl, claimed: frozenset, out: ProblemSink) -> None:
		token = self.config.token_type
		if MarkerTrait.POWERLESS in claimed and self.oracle.reaches(decl, token):
			out.error(
				f"Powerless type {decl.simple_name} can't extend Token",
				decl.name_span,
				code="E-CLAIM-TOKEN",
			)
		# Token is Equatable, so this also covers Record types extending Token.
		if MarkerTrait.RECORD in claimed and MarkerTrait.EQUATABLE in self.oracle.effective_traits(decl):
			out.error(
				f"Record type {decl.simple_name} can't be Equatable",
				decl.name_span,
				code="E-CLAIM-EQUATABLE",
			)


def verify_program(program: Program, config: Optional[VerifierConfig] = None) -> List[UnitResult]:
	"""Verify every unit registered with `program`, in registration order."""
	return Verifier(program, config).verify_units(program.units)


__all__ = ["UnitResult", "Verifier", "verify_program"]
