# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Model sketch loader: declarations, types, expressions and errors."""

from pathlib import Path

import pytest

from capsafe.model import Binary, BinaryOp, Other, RefKind, TypeKind, TypeRef, Value
from capsafe.sketch import SketchSyntaxError, load_program, load_sketch, load_sketch_file
from capsafe.traits import MarkerTrait


def test_package_and_nested_type_names() -> None:
	unit = load_sketch(
		"""
		package demo.app;
		class Outer {
			class Inner { }
			static class Nested { }
		}
		"""
	)
	assert unit.package_name == "demo.app"
	by_name = {t.name: t for t in unit.types}
	assert list(by_name) == ["demo.app.Outer", "demo.app.Outer.Inner", "demo.app.Outer.Nested"]
	assert by_name["demo.app.Outer.Inner"].enclosing == "demo.app.Outer"
	assert by_name["demo.app.Outer.Inner"].is_inner
	assert by_name["demo.app.Outer.Nested"].is_static_member
	assert not by_name["demo.app.Outer.Nested"].is_inner
	assert by_name["demo.app.Outer"].superclass == TypeRef.declared("java.lang.Object")


def test_markers_become_traits_and_other_names_interfaces() -> None:
	unit = load_sketch(
		"""
		package demo;
		interface Shape { }
		class Square implements org.joe_e.Immutable, Shape, Selfless { }
		"""
	)
	square = unit.types[1]
	assert square.traits == frozenset({MarkerTrait.IMMUTABLE, MarkerTrait.RECORD})
	assert square.interfaces == (TypeRef.declared("demo.Shape"),)


def test_interface_extends_are_super_interfaces() -> None:
	unit = load_sketch("package demo;\ninterface Base { }\ninterface Frozen extends Base, DeepFrozen { }\n")
	frozen = unit.types[1]
	assert frozen.kind is TypeKind.INTERFACE
	assert frozen.superclass is None
	assert frozen.traits == frozenset({MarkerTrait.DEEP_FROZEN})
	assert frozen.interfaces == (TypeRef.declared("demo.Base"),)


def test_enum_constants_and_superclass() -> None:
	unit = load_sketch("package demo;\nenum Suit { HEARTS, SPADES(1); int rank; }\n")
	suit = unit.types[0]
	assert suit.kind is TypeKind.ENUM
	assert suit.superclass == TypeRef.declared("java.lang.Enum")
	hearts, spades, rank = suit.fields
	assert hearts.is_enum_constant and hearts.is_static and hearts.is_final
	assert hearts.type_ref == TypeRef.declared("demo.Suit")
	assert hearts.initializer is None
	assert isinstance(spades.initializer, Other)
	assert not rank.is_enum_constant and not rank.is_final


def test_interface_fields_are_static_and_final() -> None:
	unit = load_sketch("package demo;\ninterface Limits { int MAX = 10; }\n")
	fld = unit.types[0].fields[0]
	assert fld.is_static and fld.is_final


def test_field_types() -> None:
	unit = load_sketch(
		"""
		package demo;
		class Kinds {
			int[][] grid;
			$T item;
			String name;
			java.util.List items;
			Peer peer;
		}
		"""
	)
	grid, item, name, items, peer = unit.types[0].fields
	assert grid.type_ref.kind is RefKind.ARRAY
	assert grid.type_ref.name == "int[][]"
	assert grid.type_ref.elem == TypeRef.array(TypeRef.primitive("int"))
	assert item.type_ref == TypeRef.typevar("T")
	assert name.type_ref == TypeRef.declared("java.lang.String")
	assert items.type_ref == TypeRef.declared("java.util.List")
	# Unknown simple names live in the sketch's package.
	assert peer.type_ref == TypeRef.declared("demo.Peer")


def test_expression_types_and_spans() -> None:
	src = "package demo;\nclass C { boolean f(String s) { return s == null; } }\n"
	unit = load_sketch(src, path="c.sketch")
	method = unit.types[0].methods[0]
	assert method.body is not None
	ret = method.body[0]
	assert isinstance(ret, Other) and ret.kind == "return"
	cmp = ret.operands[0]
	assert isinstance(cmp, Binary)
	assert cmp.op is BinaryOp.EQ
	assert cmp.static_type == TypeRef.primitive("boolean")
	assert isinstance(cmp.left, Value)
	assert cmp.left.static_type == TypeRef.declared("java.lang.String")
	assert cmp.right.static_type.kind is RefKind.NULL
	assert cmp.span.file == "c.sketch"
	assert cmp.span.start == src.index("s == null")
	assert cmp.span.line == 2


def test_string_concatenation_is_a_string() -> None:
	unit = load_sketch("package demo;\nclass C { final String s = \"n=\" + 1; }\n")
	init = unit.types[0].fields[0].initializer
	assert isinstance(init, Binary)
	assert init.static_type == TypeRef.declared("java.lang.String")


def test_abstract_and_native_methods_have_no_body() -> None:
	unit = load_sketch("package demo;\nclass C { native void poke(); abstract int size(); }\n")
	poke, size = unit.types[0].methods
	assert poke.is_native and poke.body is None
	assert not size.is_native and size.body is None


def test_syntax_error_carries_location() -> None:
	with pytest.raises(SketchSyntaxError) as info:
		load_sketch("package demo;\nclass { }\n", path="bad.sketch")
	assert info.value.loc.line == 2
	assert info.value.loc.file == "bad.sketch"


def test_unknown_name_in_expression() -> None:
	with pytest.raises(SketchSyntaxError, match="unknown name 'q'"):
		load_sketch("package demo;\nclass C { boolean f() { return q == null; } }\n")


def test_class_cannot_extend_two_types() -> None:
	with pytest.raises(SketchSyntaxError, match="only extend one type"):
		load_sketch("package demo;\nclass C extends A, B { }\n")


def test_marker_must_be_implemented_not_extended() -> None:
	with pytest.raises(SketchSyntaxError, match="must implement marker"):
		load_sketch("package demo;\nclass C extends Immutable { }\n")


def test_only_enums_declare_constants() -> None:
	with pytest.raises(SketchSyntaxError, match="only enums"):
		load_sketch("package demo;\nclass C { A, B; }\n")


def test_load_program_links_units(tmp_path: Path) -> None:
	path = tmp_path / "peer.sketch"
	path.write_text("package demo;\nclass Peer implements Immutable { }\n", encoding="utf-8")
	peer_unit = load_sketch_file(path)
	assert peer_unit.path == str(path)

	program = load_program(
		[
			(str(path), path.read_text(encoding="utf-8")),
			("user.sketch", "package demo;\nclass User { final Peer peer; }\n"),
		]
	)
	assert [u.path for u in program.units] == [str(path), "user.sketch"]
	assert "demo.Peer" in program
	user = program.lookup("demo.User")
	assert user is not None
	assert program.resolve(user.fields[0].type_ref) is program.lookup("demo.Peer")
