# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Program: the set of type declarations the verifier can see.

Lookup is by qualified name. The well-known library types the rules refer
to (Object, String, Enum, Token, ...) are seeded as builtin declarations so
that supertype walks over user types can reach them.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from capsafe.traits.markers import MarkerTrait
from .nodes import CompilationUnit, TypeDecl
from .types import RefKind, TypeKind, TypeRef


OBJECT_TYPE = "java.lang.Object"
ENUM_TYPE = "java.lang.Enum"
TOKEN_TYPE = "org.joe_e.Token"

# Simple names a front-end may use without an import.
BUILTIN_SIMPLE_NAMES: Dict[str, str] = {
	"Object": OBJECT_TYPE,
	"String": "java.lang.String",
	"Integer": "java.lang.Integer",
	"Character": "java.lang.Character",
	"Enum": ENUM_TYPE,
	"Token": TOKEN_TYPE,
}


def builtin_types() -> List[TypeDecl]:
	"""Fresh builtin declarations (the verifier never mutates them)."""
	obj = TypeRef.declared(OBJECT_TYPE)
	return [
		TypeDecl(name=OBJECT_TYPE, is_builtin=True),
		TypeDecl(name="java.lang.String", superclass=obj, is_builtin=True),
		TypeDecl(name="java.lang.Integer", superclass=obj, is_builtin=True),
		TypeDecl(name="java.lang.Character", superclass=obj, is_builtin=True),
		TypeDecl(name=ENUM_TYPE, superclass=obj, is_builtin=True),
		# Tokens are compared by identity; they carry no mutable state.
		TypeDecl(
			name=TOKEN_TYPE,
			traits=frozenset({MarkerTrait.IMMUTABLE, MarkerTrait.EQUATABLE}),
			superclass=obj,
			is_builtin=True,
		),
	]


class Program:
	"""
	Type declarations indexed by qualified name.

	Later declarations with the same name replace earlier ones, which lets a
	front-end override a builtin with a richer declaration.
	"""

	def __init__(self, types: Iterable[TypeDecl] = (), *, builtins: bool = True) -> None:
		self._types: Dict[str, TypeDecl] = {}
		self.units: List[CompilationUnit] = []
		if builtins:
			for decl in builtin_types():
				self.add(decl)
		for decl in types:
			self.add(decl)

	@classmethod
	def from_units(cls, units: Iterable[CompilationUnit], *, builtins: bool = True) -> "Program":
		program = cls(builtins=builtins)
		for unit in units:
			program.add_unit(unit)
		return program

	def add(self, decl: TypeDecl) -> None:
		self._types[decl.name] = decl

	def add_unit(self, unit: CompilationUnit) -> None:
		self.units.append(unit)
		for decl in unit.types:
			self.add(decl)

	def lookup(self, name: str) -> Optional[TypeDecl]:
		return self._types.get(name)

	def resolve(self, ref: Optional[TypeRef]) -> Optional[TypeDecl]:
		"""Declaration for a declared ref; None for every other kind or a missing name."""
		if ref is None or ref.kind is not RefKind.DECLARED:
			return None
		return self._types.get(ref.name)

	def user_types(self) -> List[TypeDecl]:
		return [t for t in self._types.values() if not t.is_builtin]

	def __contains__(self, name: object) -> bool:
		return name in self._types

	def __iter__(self) -> Iterator[TypeDecl]:
		return iter(list(self._types.values()))

	def __len__(self) -> int:
		return len(self._types)


__all__ = [
	"OBJECT_TYPE",
	"ENUM_TYPE",
	"TOKEN_TYPE",
	"BUILTIN_SIMPLE_NAMES",
	"builtin_types",
	"Program",
	"TypeKind",
]
