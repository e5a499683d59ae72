# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Closure finder: which declarations' fields back a trait claim.

Starting from a candidate type, follow two structural edges:
- enclosing type of a non-static nested type (inner classes can read the
  enclosing instance's fields), and
- superclass (inherited instance fields).

A neighbour that already honors the trait is trusted and not expanded; it is
verified as a claimant in its own right. The found set keeps insertion order
so the problems produced from it come out in a stable order.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List

from capsafe.model.nodes import TypeDecl
from capsafe.model.types import TypeRef
from capsafe.traits.markers import MarkerTrait
from .hierarchy import TraitOracle

logger = logging.getLogger(__name__)


@dataclass
class UnresolvedEdge:
	owner: TypeDecl
	ref: TypeRef
	edge: str  # "superclass" | "enclosing type"


@dataclass
class ScopeClosure:
	candidate: TypeDecl
	trait: MarkerTrait
	scopes: List[TypeDecl] = field(default_factory=list)
	unresolved: List[UnresolvedEdge] = field(default_factory=list)


def find_required_scopes(oracle: TraitOracle, decl: TypeDecl, trait: MarkerTrait) -> ScopeClosure:
	"""
	Compute the declarations whose own fields must satisfy `trait` for
	`decl`'s claim to hold. `decl` itself is always the first scope.

	Every call starts from an empty found set; a type is enqueued at most
	once, so cyclic hierarchies terminate.
	"""
	result = ScopeClosure(candidate=decl, trait=trait)
	found: Dict[str, TypeDecl] = {decl.name: decl}
	queue: Deque[TypeDecl] = deque([decl])

	def _visit(owner: TypeDecl, ref: TypeRef, edge: str) -> None:
		if ref.name in found:
			return
		if oracle.honoraries.is_honorary(ref.name, trait):
			return
		target = oracle.program.resolve(ref)
		if target is None:
			if not any(u.ref.name == ref.name for u in result.unresolved):
				result.unresolved.append(UnresolvedEdge(owner=owner, ref=ref, edge=edge))
			return
		if oracle.honors(target, trait):
			logger.debug("%s: %s is %s, trusted", decl.name, target.name, trait.label)
			return
		found[target.name] = target
		queue.append(target)

	while queue:
		cur = queue.popleft()
		if cur.is_inner:
			_visit(cur, TypeRef.declared(cur.enclosing or ""), "enclosing type")
		if cur.superclass is not None:
			_visit(cur, cur.superclass, "superclass")

	result.scopes = list(found.values())
	logger.debug("closure of %s for %s: %s", decl.name, trait.label, [t.name for t in result.scopes])
	return result


__all__ = ["UnresolvedEdge", "ScopeClosure", "find_required_scopes"]
