# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Marker traits and their implication lattice.

Marker traits stand in for the marker interfaces of the safe subset. A type
that declares one claims a safety property; the verifier proves structural
claims by checking fields. The lattice is fixed at import time:

  Powerless -> Immutable

DeepFrozen, Record and Data are independent axes (none implies Immutable).
Equatable is an identity permission and carries no field obligation.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Iterable


MARKER_PACKAGE = "org.joe_e"


class MarkerTrait(Enum):
	"""Closed set of marker traits understood by the verifier."""

	IMMUTABLE = "Immutable"
	POWERLESS = "Powerless"
	RECORD = "Record"
	DATA = "Data"
	EQUATABLE = "Equatable"
	DEEP_FROZEN = "DeepFrozen"

	@property
	def label(self) -> str:
		return self.value

	@property
	def qualified_name(self) -> str:
		return f"{MARKER_PACKAGE}.{self.value}"

	@property
	def structural(self) -> bool:
		"""True when claiming the trait obliges every field to honor it."""
		return self is not MarkerTrait.EQUATABLE

	@classmethod
	def from_name(cls, name: str) -> "MarkerTrait":
		"""
		Map a marker interface name (simple or qualified) to a trait.

		Accepts the legacy spellings `Incapable` (Powerless) and `Selfless`
		(Record). Raises ValueError for anything else.
		"""
		trait = cls.lookup(name)
		if trait is None:
			raise ValueError(f"unknown marker trait '{name}'")
		return trait

	@classmethod
	def lookup(cls, name: str) -> "MarkerTrait | None":
		simple = name
		if "." in name:
			pkg, _, simple = name.rpartition(".")
			if pkg != MARKER_PACKAGE:
				return None
		simple = _LEGACY_NAMES.get(simple, simple)
		for trait in cls:
			if trait.value == simple:
				return trait
		return None


_LEGACY_NAMES: Dict[str, str] = {
	"Incapable": "Powerless",
	"Selfless": "Record",
}

# Direct implications; the transitive closure is computed once below.
_DIRECT_IMPLIES: Dict[MarkerTrait, FrozenSet[MarkerTrait]] = {
	MarkerTrait.POWERLESS: frozenset({MarkerTrait.IMMUTABLE}),
}


def _close_implications(direct: Dict[MarkerTrait, FrozenSet[MarkerTrait]]) -> Dict[MarkerTrait, FrozenSet[MarkerTrait]]:
	out: Dict[MarkerTrait, FrozenSet[MarkerTrait]] = {}
	for trait in MarkerTrait:
		seen: set[MarkerTrait] = set()
		stack = list(direct.get(trait, ()))
		while stack:
			cur = stack.pop()
			if cur in seen:
				continue
			if cur is trait:
				raise ValueError(f"marker trait implication cycle through {trait.label}")
			seen.add(cur)
			stack.extend(direct.get(cur, ()))
		out[trait] = frozenset(seen)
	return out


_IMPLIES: Dict[MarkerTrait, FrozenSet[MarkerTrait]] = _close_implications(_DIRECT_IMPLIES)


def implied_by(trait: MarkerTrait) -> FrozenSet[MarkerTrait]:
	"""Traits implied by `trait` (transitively, excluding `trait` itself)."""
	return _IMPLIES[trait]


def implies_closure(traits: Iterable[MarkerTrait]) -> FrozenSet[MarkerTrait]:
	"""Close a trait set under implication."""
	out: set[MarkerTrait] = set()
	for trait in traits:
		out.add(trait)
		out |= _IMPLIES[trait]
	return frozenset(out)


def minimal_claims(traits: Iterable[MarkerTrait]) -> list[MarkerTrait]:
	"""
	Structural traits in `traits` that are not implied by another trait in
	the set, in declaration order of the enum.

	Verifying Powerless already proves Immutable for the same fields, so a
	type claiming both is only checked once.
	"""
	claimed = frozenset(traits)
	out: list[MarkerTrait] = []
	for trait in MarkerTrait:
		if trait not in claimed or not trait.structural:
			continue
		if any(trait in _IMPLIES[other] for other in claimed if other is not trait):
			continue
		out.append(trait)
	return out


__all__ = [
	"MARKER_PACKAGE",
	"MarkerTrait",
	"implied_by",
	"implies_closure",
	"minimal_claims",
]
