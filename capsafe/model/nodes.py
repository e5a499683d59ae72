# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declarations and expression trees of a compilation unit.

The verifier only acts on a closed set of node kinds (equality comparisons,
method declarations, package declarations); every other expression is an
`Other` node whose operands are walked transparently. Every expression
carries its resolved static type and a source span.

Guiding rules:
- Nodes are plain data; nothing here performs resolution or checking.
- Nested types are listed flat in `CompilationUnit.types` and point at their
  enclosing type by qualified name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, Iterator, List, Optional, Tuple

from capsafe.core.span import Span
from capsafe.traits.markers import MarkerTrait
from .types import TypeKind, TypeRef


class Node:
	"""Base class for all model nodes."""
	pass


class Expr(Node):
	"""Base class for expressions; subclasses carry `static_type` and `span`."""
	static_type: TypeRef
	span: Span


class BinaryOp(Enum):
	EQ = auto()
	NE = auto()
	LT = auto()
	LE = auto()
	GT = auto()
	GE = auto()
	AND = auto()
	OR = auto()
	ADD = auto()
	SUB = auto()

	@property
	def is_equality(self) -> bool:
		return self in (BinaryOp.EQ, BinaryOp.NE)


@dataclass
class Value(Expr):
	"""Leaf expression: a variable, literal or any value whose inside is irrelevant."""
	text: str
	static_type: TypeRef
	span: Span = field(default_factory=Span)


@dataclass
class Binary(Expr):
	op: BinaryOp
	left: Expr
	right: Expr
	static_type: TypeRef
	span: Span = field(default_factory=Span)


@dataclass
class Other(Expr):
	"""Any other expression kind (call, cast, assignment, ...); operands are walked."""
	kind: str
	operands: List[Expr]
	static_type: TypeRef
	span: Span = field(default_factory=Span)


@dataclass
class PackageDecl(Node):
	name: str
	span: Span = field(default_factory=Span)


@dataclass
class FieldDecl(Node):
	name: str
	type_ref: TypeRef
	is_final: bool = False
	is_static: bool = False
	is_synthetic: bool = False
	is_enum_constant: bool = False
	name_span: Span = field(default_factory=Span)
	initializer: Optional[Expr] = None

	@property
	def exempt(self) -> bool:
		"""Enum constants and compiler-synthetic fields are never checked."""
		return self.is_enum_constant or self.is_synthetic


@dataclass
class MethodDecl(Node):
	name: str
	return_type: TypeRef
	is_native: bool = False
	is_static: bool = False
	body: Optional[List[Expr]] = None  # None for abstract/native methods
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class TypeDecl(Node):
	"""
	One type declaration.

	`enclosing` is set for every nested type; it only counts as a structural
	edge when `is_static_member` is false (inner classes see the fields of
	their enclosing instance).
	"""

	name: str
	kind: TypeKind = TypeKind.CLASS
	traits: FrozenSet[MarkerTrait] = frozenset()
	superclass: Optional[TypeRef] = None
	interfaces: Tuple[TypeRef, ...] = ()
	enclosing: Optional[str] = None
	is_static_member: bool = False
	fields: List[FieldDecl] = field(default_factory=list)
	methods: List[MethodDecl] = field(default_factory=list)
	is_builtin: bool = False
	name_span: Span = field(default_factory=Span)
	span: Span = field(default_factory=Span)

	@property
	def simple_name(self) -> str:
		return self.name.rpartition(".")[2]

	@property
	def is_interface(self) -> bool:
		return self.kind in (TypeKind.INTERFACE, TypeKind.ANNOTATION)

	@property
	def is_inner(self) -> bool:
		"""True for non-static nested types (the enclosing edge applies)."""
		return self.enclosing is not None and not self.is_static_member

	def ref(self) -> TypeRef:
		return TypeRef.declared(self.name)

	def __hash__(self) -> int:
		return hash(self.name)

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, TypeDecl):
			return NotImplemented
		return self is other or self.name == other.name


@dataclass
class CompilationUnit(Node):
	path: Optional[str] = None
	packages: List[PackageDecl] = field(default_factory=list)
	types: List[TypeDecl] = field(default_factory=list)

	@property
	def package_name(self) -> str:
		return self.packages[0].name if self.packages else ""


def iter_children(node: Node) -> Iterator[Node]:
	"""Yield the direct child nodes of `node`, in field order."""
	for field_name in getattr(node, "__dataclass_fields__", {}) or {}:
		val = getattr(node, field_name, None)
		if isinstance(val, Node):
			yield val
		elif isinstance(val, list):
			for item in val:
				if isinstance(item, Node):
					yield item


__all__ = [
	"Node",
	"Expr",
	"BinaryOp",
	"Value",
	"Binary",
	"Other",
	"PackageDecl",
	"FieldDecl",
	"MethodDecl",
	"TypeDecl",
	"CompilationUnit",
	"iter_children",
]
