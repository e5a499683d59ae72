# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Static type references used by the program model.

A TypeRef is what a field declaration or an expression resolves to. The
front-end decides the kind; declared refs name a type by qualified name and
are looked up in the Program when the verifier needs the declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


PRIMITIVE_NAMES = frozenset(
	{"boolean", "byte", "char", "short", "int", "long", "float", "double"}
)


class TypeKind(Enum):
	"""Kinds of type declarations."""

	CLASS = auto()
	INTERFACE = auto()
	ENUM = auto()
	ANNOTATION = auto()


class RefKind(Enum):
	"""Kinds of static type references."""

	PRIMITIVE = auto()
	NULL = auto()
	ARRAY = auto()
	TYPEVAR = auto()
	DECLARED = auto()
	UNRESOLVED = auto()  # the front-end could not resolve the name


@dataclass(frozen=True)
class TypeRef:
	kind: RefKind
	name: str
	elem: Optional["TypeRef"] = None  # only meaningful for RefKind.ARRAY

	@classmethod
	def primitive(cls, name: str) -> "TypeRef":
		if name not in PRIMITIVE_NAMES:
			raise ValueError(f"'{name}' is not a primitive type")
		return cls(RefKind.PRIMITIVE, name)

	@classmethod
	def null(cls) -> "TypeRef":
		return cls(RefKind.NULL, "null")

	@classmethod
	def array(cls, elem: "TypeRef") -> "TypeRef":
		return cls(RefKind.ARRAY, f"{elem.name}[]", elem=elem)

	@classmethod
	def typevar(cls, name: str) -> "TypeRef":
		return cls(RefKind.TYPEVAR, name)

	@classmethod
	def declared(cls, name: str) -> "TypeRef":
		return cls(RefKind.DECLARED, name)

	@classmethod
	def unresolved(cls, name: str) -> "TypeRef":
		return cls(RefKind.UNRESOLVED, name)

	@property
	def is_value(self) -> bool:
		"""Primitive and null operands compare by value, never by identity."""
		return self.kind in (RefKind.PRIMITIVE, RefKind.NULL)

	@property
	def simple_name(self) -> str:
		return self.name.rpartition(".")[2]

	def __str__(self) -> str:
		return self.name


__all__ = ["PRIMITIVE_NAMES", "TypeKind", "RefKind", "TypeRef"]
