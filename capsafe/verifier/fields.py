# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Field verifier: every field in a claim's closure must be final and of a
type that honors the claimed trait.

Problems are always attributed to the candidate (the type that made the
claim). A field declared on the candidate anchors at the field's name; a
field declared elsewhere in the closure anchors at the candidate's name and
the message names where the field came from.
"""

from __future__ import annotations

from typing import Iterable, List

from capsafe.core.diagnostics import Problem
from capsafe.core.span import Span
from capsafe.model.nodes import FieldDecl, TypeDecl
from capsafe.traits.markers import MarkerTrait
from .hierarchy import Honor, TraitOracle


def verify_fields(
	oracle: TraitOracle,
	scopes: Iterable[TypeDecl],
	trait: MarkerTrait,
	candidate: TypeDecl,
) -> List[Problem]:
	if candidate.is_interface:
		return []
	problems: List[Problem] = []
	for scope in scopes:
		for fld in scope.fields:
			if fld.exempt:
				continue
			problems.extend(_check_field(oracle, fld, scope, trait, candidate))
	return problems


def _check_field(
	oracle: TraitOracle,
	fld: FieldDecl,
	scope: TypeDecl,
	trait: MarkerTrait,
	candidate: TypeDecl,
) -> List[Problem]:
	own = scope is candidate or scope.name == candidate.name
	span = fld.name_span if own else candidate.name_span
	origin = "" if own else f" from {scope.simple_name}"
	kind = "static field" if fld.is_static else "field"
	where = f"in {trait.label} class {candidate.simple_name}"

	if not fld.is_final:
		code = "E-STATIC-NOT-FINAL" if fld.is_static else "E-FIELD-NOT-FINAL"
		return [_problem(f"Non-final {kind} {fld.name}{origin} {where}", span, code)]

	honor = oracle.honors_ref(fld.type_ref, trait)
	if honor is Honor.YES:
		return []
	out: List[Problem] = []
	if honor is Honor.UNRESOLVED:
		out.append(
			_problem(
				f"Could not resolve type {fld.type_ref} of {kind} {fld.name}{origin}",
				span,
				"E-UNRESOLVED-TYPE",
			)
		)
	code = "E-STATIC-TRAIT" if fld.is_static else "E-FIELD-TRAIT"
	out.append(_problem(f"Non-{trait.label} {kind} {fld.name}{origin} {where}", span, code))
	return out


def check_static_state(oracle: TraitOracle, decl: TypeDecl, *, under_claim: bool = False) -> List[Problem]:
	"""
	Global-state rule: the own static fields of every type, interfaces
	included, must be final and Powerless.

	With `under_claim=True` the type also makes a structural claim whose
	field check has already reported non-final and unresolved statics, so
	only the Powerless requirement is added here.
	"""
	problems: List[Problem] = []
	trait = MarkerTrait.POWERLESS
	for fld in decl.fields:
		if not fld.is_static or fld.exempt:
			continue
		if not fld.is_final:
			if under_claim:
				continue
			problems.append(_problem(f"Non-final static field {fld.name}.", fld.name_span, "E-STATIC-NOT-FINAL"))
			continue
		honor = oracle.honors_ref(fld.type_ref, trait)
		if honor is Honor.YES:
			continue
		if honor is Honor.UNRESOLVED and not under_claim:
			problems.append(
				_problem(
					f"Could not resolve type {fld.type_ref} of static field {fld.name}",
					fld.name_span,
					"E-UNRESOLVED-TYPE",
				)
			)
		problems.append(_problem(f"Non-{trait.label} static field {fld.name}.", fld.name_span, "E-STATIC-TRAIT"))
	return problems


def _problem(message: str, span: Span, code: str) -> Problem:
	return Problem(message=message, span=span, code=code)


__all__ = ["verify_fields", "check_static_state"]
