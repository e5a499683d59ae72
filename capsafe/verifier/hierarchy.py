# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Supertype walks and trait membership.

Every walk here carries a visited set keyed by qualified name: the input
hierarchy is not assumed to be a DAG (a malformed model may declare
`A extends B`, `B extends A`).
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Deque, FrozenSet, List, Optional, Set

from capsafe.model.nodes import TypeDecl
from capsafe.model.program import Program
from capsafe.model.types import RefKind, TypeRef
from capsafe.traits.honoraries import HonoraryTable
from capsafe.traits.markers import MarkerTrait, implies_closure


class Honor(Enum):
	"""Outcome of asking whether a static type satisfies a trait."""

	YES = auto()
	NO = auto()
	UNRESOLVED = auto()


@dataclass
class SupertypeWalk:
	"""Result of walking the supertypes of one declaration (itself excluded)."""

	types: List[TypeDecl] = field(default_factory=list)
	unresolved: List[TypeRef] = field(default_factory=list)

	def names(self) -> Set[str]:
		out = {t.name for t in self.types}
		out.update(r.name for r in self.unresolved)
		return out


class TraitOracle:
	"""
	Answers trait questions about declarations and static types.

	Effective traits of a type are its declared traits, the traits (declared
	or honorary) of everything above it, and its own honorary grants, closed
	under implication. Nothing is memoized: the model is read fresh on every
	question.
	"""

	def __init__(self, program: Program, honoraries: HonoraryTable) -> None:
		self.program = program
		self.honoraries = honoraries

	def supertypes(self, decl: TypeDecl) -> SupertypeWalk:
		walk = SupertypeWalk()
		seen: Set[str] = {decl.name}
		queue: Deque[TypeDecl] = deque([decl])
		while queue:
			cur = queue.popleft()
			for ref in _direct_supers(cur):
				if ref.name in seen:
					continue
				seen.add(ref.name)
				sup = self.program.resolve(ref)
				if sup is None:
					walk.unresolved.append(ref)
					continue
				walk.types.append(sup)
				queue.append(sup)
		return walk

	def reaches(self, decl: TypeDecl, root: str) -> bool:
		"""True when `decl` is `root` or has it anywhere above it."""
		if decl.name == root:
			return True
		return root in self.supertypes(decl).names()

	def effective_traits(self, decl: TypeDecl) -> FrozenSet[MarkerTrait]:
		traits: Set[MarkerTrait] = set(decl.traits)
		traits |= self.honoraries.traits_of(decl.name)
		walk = self.supertypes(decl)
		for sup in walk.types:
			traits |= sup.traits
			traits |= self.honoraries.traits_of(sup.name)
		for ref in walk.unresolved:
			traits |= self.honoraries.traits_of(ref.name)
		return implies_closure(traits)

	def honors(self, decl: TypeDecl, trait: MarkerTrait) -> bool:
		if self.honoraries.is_honorary(decl.name, trait):
			return True
		return trait in self.effective_traits(decl)

	def honors_ref(self, ref: Optional[TypeRef], trait: MarkerTrait) -> Honor:
		"""
		Whether a field/expression type satisfies `trait`.

		Primitives always do. Arrays and type variables never do (their
		contents or runtime type are not pinned down). Declared types do when
		honorary or when the trait is among their effective traits.
		"""
		if ref is None:
			return Honor.NO
		if ref.kind in (RefKind.PRIMITIVE, RefKind.NULL):
			return Honor.YES
		if ref.kind in (RefKind.ARRAY, RefKind.TYPEVAR):
			return Honor.NO
		if self.honoraries.is_honorary(ref.name, trait):
			return Honor.YES
		decl = self.program.resolve(ref)
		if decl is None:
			return Honor.UNRESOLVED
		return Honor.YES if self.honors(decl, trait) else Honor.NO


def _direct_supers(decl: TypeDecl) -> List[TypeRef]:
	out: List[TypeRef] = []
	if decl.superclass is not None:
		out.append(decl.superclass)
	out.extend(decl.interfaces)
	return out


__all__ = ["Honor", "SupertypeWalk", "TraitOracle"]
