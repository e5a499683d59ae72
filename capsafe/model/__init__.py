# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
capsafe.model: the program model consumed by the verifier.

Front-ends (the sketch loader, or an adapter over a real compiler) build
these objects; the verifier only reads them.
"""

from .types import PRIMITIVE_NAMES, RefKind, TypeKind, TypeRef
from .nodes import (
	Binary,
	BinaryOp,
	CompilationUnit,
	Expr,
	FieldDecl,
	MethodDecl,
	Node,
	Other,
	PackageDecl,
	TypeDecl,
	Value,
	iter_children,
)
from .program import (
	BUILTIN_SIMPLE_NAMES,
	ENUM_TYPE,
	OBJECT_TYPE,
	TOKEN_TYPE,
	Program,
	builtin_types,
)

__all__ = [
	"PRIMITIVE_NAMES",
	"RefKind",
	"TypeKind",
	"TypeRef",
	"Binary",
	"BinaryOp",
	"CompilationUnit",
	"Expr",
	"FieldDecl",
	"MethodDecl",
	"Node",
	"Other",
	"PackageDecl",
	"TypeDecl",
	"Value",
	"iter_children",
	"BUILTIN_SIMPLE_NAMES",
	"ENUM_TYPE",
	"OBJECT_TYPE",
	"TOKEN_TYPE",
	"Program",
	"builtin_types",
]
