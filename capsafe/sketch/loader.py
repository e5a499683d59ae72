# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Build program-model units from model sketches.

Two passes per unit:
  1. collect the qualified names of every type declared in the sketch, so
     references can point forward and between nested types;
  2. build TypeDecls in pre-order (outer before inner) with resolved
     TypeRefs and typed expression trees.

Name resolution is shallow: marker names become traits,
sketch-local simple names and `Outer.Inner` paths resolve to the types of
this sketch, a few well-known library names resolve to their `java.lang` /
`org.joe_e` homes, dotted names are taken as qualified, and anything else is
placed in the sketch's package (it may be declared by another sketch).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from capsafe.core.span import Span
from capsafe.model.nodes import (
	Binary,
	BinaryOp,
	CompilationUnit,
	Expr,
	FieldDecl,
	MethodDecl,
	Other,
	PackageDecl,
	TypeDecl,
	Value,
)
from capsafe.model.program import BUILTIN_SIMPLE_NAMES, ENUM_TYPE, OBJECT_TYPE, Program
from capsafe.model.types import RefKind, TypeKind, TypeRef
from capsafe.traits.markers import MarkerTrait

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_KIND_BY_TOKEN: Dict[str, TypeKind] = {
	"CLASS": TypeKind.CLASS,
	"INTERFACE": TypeKind.INTERFACE,
	"ENUM": TypeKind.ENUM,
	"AT_INTERFACE": TypeKind.ANNOTATION,
}

_BINARY_OPS: Dict[str, BinaryOp] = {
	"==": BinaryOp.EQ,
	"!=": BinaryOp.NE,
	"<": BinaryOp.LT,
	"<=": BinaryOp.LE,
	">": BinaryOp.GT,
	">=": BinaryOp.GE,
	"&&": BinaryOp.AND,
	"||": BinaryOp.OR,
	"+": BinaryOp.ADD,
	"-": BinaryOp.SUB,
}

_BOOLEAN = TypeRef.primitive("boolean")
_INT = TypeRef.primitive("int")
_VOID = TypeRef(RefKind.PRIMITIVE, "void")
_STRING = TypeRef.declared("java.lang.String")


class SketchSyntaxError(ValueError):
	"""
	User-facing error in a model sketch.

	Carries a best-effort location (`loc`) so the CLI can report it as a
	structured problem instead of a traceback.
	"""

	def __init__(self, message: str, *, loc: Span | None = None) -> None:
		super().__init__(message)
		self.loc = loc or Span()


def load_sketch(source: str, *, path: Optional[str] = None) -> CompilationUnit:
	"""Parse one sketch into a CompilationUnit."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise SketchSyntaxError(_describe_parse_error(err), loc=_error_span(err, path)) from err
	unit = _UnitBuilder(path).build(tree)
	logger.debug("loaded sketch %s: %d types", path or "<memory>", len(unit.types))
	return unit


def load_sketch_file(path: Path) -> CompilationUnit:
	return load_sketch(path.read_text(encoding="utf-8"), path=str(path))


def load_program(sources: Iterable[Tuple[Optional[str], str]], *, builtins: bool = True) -> Program:
	"""Parse several (path, text) sketches into one Program, in order."""
	program = Program(builtins=builtins)
	for path, text in sources:
		program.add_unit(load_sketch(text, path=path))
	return program


def _describe_parse_error(err: UnexpectedInput) -> str:
	if isinstance(err, UnexpectedEOF):
		return "unexpected end of sketch"
	if isinstance(err, UnexpectedToken):
		return f"unexpected token '{err.token}'"
	if isinstance(err, UnexpectedCharacters):
		return f"unexpected character '{err.char}'"
	return "syntax error"


def _error_span(err: UnexpectedInput, path: Optional[str]) -> Span:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	start = getattr(err, "pos_in_stream", None)
	return Span(
		file=path,
		line=line if isinstance(line, int) and line > 0 else None,
		column=column if isinstance(column, int) and column > 0 else None,
		start=start if isinstance(start, int) and start >= 0 else None,
		length=1 if isinstance(start, int) and start >= 0 else None,
	)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	return node.type


def _trees(node: Tree, name: Optional[str] = None) -> List[Tree]:
	return [c for c in node.children if isinstance(c, Tree) and (name is None or _name(c) == name)]


def _tree(node: Tree, name: str) -> Optional[Tree]:
	return next(iter(_trees(node, name)), None)


def _tokens(node: Tree, kind: Optional[str] = None) -> List[Token]:
	return [c for c in node.children if isinstance(c, Token) and (kind is None or c.type == kind)]


class _UnitBuilder:
	def __init__(self, path: Optional[str]) -> None:
		self.path = path
		self.package = ""
		# Simple and `Outer.Inner` names of sketch-local types -> qualified names.
		self.local_names: Dict[str, str] = {}
		self.types: List[TypeDecl] = []
		self._by_name: Dict[str, TypeDecl] = {}

	def build(self, tree: Tree) -> CompilationUnit:
		packages = [self._package(p) for p in _trees(tree, "package_decl")]
		if packages:
			self.package = packages[0].name
		type_trees = _trees(tree, "type_decl")
		for td in type_trees:
			self._collect_names(td, outer_path="")
		for td in type_trees:
			self._type_decl(td, enclosing=None, outer_path="")
		return CompilationUnit(path=self.path, packages=packages, types=self.types)

	# Spans

	def _span(self, node: Tree | Token) -> Span:
		if isinstance(node, Token):
			start = node.start_pos
			end = node.end_pos
			return Span(
				file=self.path,
				line=node.line,
				column=node.column,
				start=start,
				length=(end - start) if start is not None and end is not None else None,
			)
		meta = node.meta
		if getattr(meta, "empty", True):
			return Span(file=self.path)
		return Span(
			file=self.path,
			line=meta.line,
			column=meta.column,
			start=meta.start_pos,
			length=meta.end_pos - meta.start_pos,
		)

	# Names

	def _qualify(self, rel: str) -> str:
		return f"{self.package}.{rel}" if self.package else rel

	def _collect_names(self, td: Tree, outer_path: str) -> None:
		simple = _tokens(td, "NAME")[0].value
		rel = f"{outer_path}.{simple}" if outer_path else simple
		qualified = self._qualify(rel)
		self.local_names.setdefault(simple, qualified)
		self.local_names.setdefault(rel, qualified)
		body = _tree(td, "class_body")
		if body is not None:
			for inner in _trees(body, "type_decl"):
				self._collect_names(inner, rel)

	def _resolve_name(self, name: str) -> str:
		if name in self.local_names:
			return self.local_names[name]
		if name in BUILTIN_SIMPLE_NAMES:
			return BUILTIN_SIMPLE_NAMES[name]
		if "." in name:
			return name
		return self._qualify(name)

	@staticmethod
	def _qname(node: Tree) -> str:
		return ".".join(t.value for t in _tokens(node, "NAME"))

	# Declarations

	def _package(self, node: Tree) -> PackageDecl:
		qn = _tree(node, "qname")
		assert qn is not None
		return PackageDecl(name=self._qname(qn), span=self._span(node))

	def _type_decl(self, td: Tree, enclosing: Optional[TypeDecl], outer_path: str) -> TypeDecl:
		name_tok = _tokens(td, "NAME")[0]
		kind_tree = _tree(td, "type_kind")
		assert kind_tree is not None
		kind = _KIND_BY_TOKEN[_tokens(kind_tree)[0].type]
		mods = self._modifiers(td)
		rel = f"{outer_path}.{name_tok.value}" if outer_path else name_tok.value
		qualified = self._qualify(rel)

		extends = self._clause_names(td, "extends_clause")
		implements = self._clause_names(td, "implements_clause")
		traits: set[MarkerTrait] = set()
		interfaces: List[TypeRef] = []
		superclass: Optional[TypeRef] = None

		def _add_interface(n: str) -> None:
			trait = MarkerTrait.lookup(n)
			if trait is not None:
				traits.add(trait)
			else:
				interfaces.append(TypeRef.declared(self._resolve_name(n)))

		span = self._span(name_tok)
		if kind is TypeKind.CLASS:
			if len(extends) > 1:
				raise SketchSyntaxError(f"class {name_tok.value} can only extend one type", loc=span)
			if extends:
				if MarkerTrait.lookup(extends[0]) is not None:
					raise SketchSyntaxError(
						f"class {name_tok.value} must implement marker {extends[0]}, not extend it",
						loc=span,
					)
				superclass = TypeRef.declared(self._resolve_name(extends[0]))
			else:
				superclass = TypeRef.declared(OBJECT_TYPE)
			for n in implements:
				_add_interface(n)
		elif kind is TypeKind.ENUM:
			if extends:
				raise SketchSyntaxError(f"enum {name_tok.value} cannot extend a type", loc=span)
			superclass = TypeRef.declared(ENUM_TYPE)
			for n in implements:
				_add_interface(n)
		else:
			if implements:
				raise SketchSyntaxError(f"interface {name_tok.value} cannot implement types; use extends", loc=span)
			for n in extends:
				_add_interface(n)

		is_static_member = False
		if enclosing is not None:
			is_static_member = (
				"STATIC" in mods
				or kind is not TypeKind.CLASS
				or enclosing.is_interface
			)

		decl = TypeDecl(
			name=qualified,
			kind=kind,
			traits=frozenset(traits),
			superclass=superclass,
			interfaces=tuple(interfaces),
			enclosing=enclosing.name if enclosing is not None else None,
			is_static_member=is_static_member,
			name_span=span,
			span=self._span(td),
		)
		self.types.append(decl)
		self._by_name[decl.name] = decl

		body = _tree(td, "class_body")
		assert body is not None
		constants = _tree(body, "enum_constants")
		if constants is not None:
			if kind is not TypeKind.ENUM:
				raise SketchSyntaxError(f"only enums declare constants ({name_tok.value})", loc=span)
			for const in _trees(constants, "enum_constant"):
				decl.fields.append(self._enum_constant(const, decl))
		for fd in _trees(body, "field_decl"):
			decl.fields.append(self._field(fd, decl))
		for md in _trees(body, "method_decl"):
			decl.methods.append(self._method(md, decl))
		for inner in _trees(body, "type_decl"):
			self._type_decl(inner, enclosing=decl, outer_path=rel)
		return decl

	def _clause_names(self, node: Tree, clause: str) -> List[str]:
		clause_tree = _tree(node, clause)
		if clause_tree is None:
			return []
		return [self._qname(q) for q in _trees(clause_tree, "qname")]

	def _modifiers(self, node: Tree) -> set[str]:
		mods = _tree(node, "modifiers")
		if mods is None:
			return set()
		return {t.type for t in _tokens(mods)}

	def _enum_constant(self, node: Tree, owner: TypeDecl) -> FieldDecl:
		name_tok = _tokens(node, "NAME")[0]
		args_tree = _tree(node, "args")
		init = None
		if args_tree is not None:
			init = Other(
				kind="new",
				operands=[self._expr(a, owner, {}) for a in _trees(args_tree)],
				static_type=owner.ref(),
				span=self._span(node),
			)
		return FieldDecl(
			name=name_tok.value,
			type_ref=owner.ref(),
			is_final=True,
			is_static=True,
			is_enum_constant=True,
			name_span=self._span(name_tok),
			initializer=init,
		)

	def _field(self, node: Tree, owner: TypeDecl) -> FieldDecl:
		mods = self._modifiers(node)
		type_tree = _tree(node, "type_ref")
		assert type_tree is not None
		type_ref = self._type_ref(type_tree)
		name_tok = _tokens(node, "NAME")[0]
		if type_ref == _VOID:
			raise SketchSyntaxError(f"field {name_tok.value} cannot be void", loc=self._span(name_tok))
		implicit = owner.is_interface
		init_trees = [c for c in _trees(node) if _name(c) not in ("modifiers", "type_ref")]
		init = self._expr(init_trees[0], owner, {}) if init_trees else None
		return FieldDecl(
			name=name_tok.value,
			type_ref=type_ref,
			is_final=implicit or "FINAL" in mods,
			is_static=implicit or "STATIC" in mods,
			is_synthetic="SYNTHETIC" in mods,
			name_span=self._span(name_tok),
			initializer=init,
		)

	def _method(self, node: Tree, owner: TypeDecl) -> MethodDecl:
		mods = self._modifiers(node)
		type_tree = _tree(node, "type_ref")
		assert type_tree is not None
		name_tok = _tokens(node, "NAME")[0]
		scope: Dict[str, TypeRef] = {}
		params = _tree(node, "params")
		if params is not None:
			for p in _trees(params, "param"):
				p_type = _tree(p, "type_ref")
				assert p_type is not None
				scope[_tokens(p, "NAME")[0].value] = self._type_ref(p_type)
		block = _tree(node, "block")
		body: Optional[List[Expr]] = None
		if block is not None:
			body = [self._stmt(s, owner, scope) for s in _trees(block, "stmt")]
		return MethodDecl(
			name=name_tok.value,
			return_type=self._type_ref(type_tree),
			is_native="NATIVE" in mods,
			is_static="STATIC" in mods,
			body=body,
			span=self._span(node),
		)

	# Types

	def _type_ref(self, node: Tree) -> TypeRef:
		base: TypeRef
		prim = _tree(node, "primitive")
		qn = _tree(node, "qname")
		if prim is not None:
			base = TypeRef.primitive(_tokens(prim)[0].value)
		elif qn is not None:
			base = TypeRef.declared(self._resolve_name(self._qname(qn)))
		else:
			tok = _tokens(node)[0]
			if tok.type == "VOID":
				base = _VOID
			else:
				base = TypeRef.typevar(tok.value[1:])
		dims = _tree(node, "dims")
		for _ in range(len(_tokens(dims)) if dims is not None else 0):
			base = TypeRef.array(base)
		return base

	# Expressions

	def _stmt(self, node: Tree, owner: TypeDecl, scope: Dict[str, TypeRef]) -> Expr:
		exprs = [self._expr(c, owner, scope) for c in _trees(node)]
		if _tokens(node, "RETURN"):
			return Other(kind="return", operands=exprs, static_type=_VOID, span=self._span(node))
		return exprs[0]

	def _expr(self, node: Tree | Token, owner: TypeDecl, scope: Dict[str, TypeRef]) -> Expr:
		if isinstance(node, Token):
			raise SketchSyntaxError(f"unexpected token '{node.value}'", loc=self._span(node))
		kind = _name(node)
		span = self._span(node)
		if kind == "binary":
			left_node, op_tok, right_node = node.children
			assert isinstance(op_tok, Token)
			left = self._expr(left_node, owner, scope)
			right = self._expr(right_node, owner, scope)
			op = _BINARY_OPS[op_tok.value]
			return Binary(op=op, left=left, right=right, static_type=_binary_type(op, left, right), span=span)
		if kind == "typed_name":
			type_tree = _tree(node, "type_ref")
			assert type_tree is not None
			return Value(text=_tokens(node, "NAME")[0].value, static_type=self._type_ref(type_tree), span=span)
		if kind == "bare_name":
			name = _tokens(node, "NAME")[0].value
			return Value(text=name, static_type=self._lookup_name(name, owner, scope, span), span=span)
		if kind == "call":
			type_tree = _tree(node, "type_ref")
			assert type_tree is not None
			args = _tree(node, "args")
			operands = [self._expr(a, owner, scope) for a in _trees(args)] if args is not None else []
			return Other(kind="call", operands=operands, static_type=self._type_ref(type_tree), span=span)
		if kind == "new_obj":
			qn = _tree(node, "qname")
			assert qn is not None
			args = _tree(node, "args")
			operands = [self._expr(a, owner, scope) for a in _trees(args)] if args is not None else []
			ty = TypeRef.declared(self._resolve_name(self._qname(qn)))
			return Other(kind="new", operands=operands, static_type=ty, span=span)
		if kind == "null_lit":
			return Value(text="null", static_type=TypeRef.null(), span=span)
		if kind == "bool_lit":
			return Value(text=_tokens(node)[0].value, static_type=_BOOLEAN, span=span)
		if kind == "int_lit":
			return Value(text=_tokens(node)[0].value, static_type=_INT, span=span)
		if kind == "string_lit":
			return Value(text=_tokens(node)[0].value, static_type=_STRING, span=span)
		raise SketchSyntaxError(f"unsupported expression '{kind}'", loc=span)

	def _lookup_name(self, name: str, owner: TypeDecl, scope: Dict[str, TypeRef], span: Span) -> TypeRef:
		if name in scope:
			return scope[name]
		# Own fields first, then the fields of enclosing types.
		cur: Optional[TypeDecl] = owner
		while cur is not None:
			for fld in cur.fields:
				if fld.name == name:
					return fld.type_ref
			cur = self._by_name.get(cur.enclosing) if cur.enclosing else None
		raise SketchSyntaxError(f"unknown name '{name}' (annotate it as '{name}: Type')", loc=span)


def _binary_type(op: BinaryOp, left: Expr, right: Expr) -> TypeRef:
	if op is BinaryOp.ADD:
		if left.static_type == _STRING or right.static_type == _STRING:
			return _STRING
		return left.static_type
	if op is BinaryOp.SUB:
		return left.static_type
	return _BOOLEAN


__all__ = [
	"SketchSyntaxError",
	"load_sketch",
	"load_sketch_file",
	"load_program",
]
