# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Closure finder over superclass and enclosing-instance edges."""

from capsafe.model import FieldDecl, Program, TypeDecl, TypeRef
from capsafe.traits import HonoraryTable, MarkerTrait
from capsafe.verifier import TraitOracle, Verifier, find_required_scopes


def _cyclic_program() -> Program:
	# A malformed model: A and B extend each other.
	a = TypeDecl(
		name="demo.A",
		superclass=TypeRef.declared("demo.B"),
		fields=[FieldDecl(name="a", type_ref=TypeRef.primitive("int"))],
	)
	b = TypeDecl(
		name="demo.B",
		superclass=TypeRef.declared("demo.A"),
		fields=[FieldDecl(name="b", type_ref=TypeRef.primitive("int"))],
	)
	c = TypeDecl(
		name="demo.C",
		traits=frozenset({MarkerTrait.IMMUTABLE}),
		superclass=TypeRef.declared("demo.A"),
	)
	return Program([a, b, c])


def test_cyclic_superclasses_terminate() -> None:
	program = _cyclic_program()
	oracle = TraitOracle(program, HonoraryTable())
	closure = find_required_scopes(oracle, program.lookup("demo.C"), MarkerTrait.IMMUTABLE)
	assert [t.simple_name for t in closure.scopes] == ["C", "A", "B"]
	assert closure.unresolved == []


def test_cyclic_superclasses_problems_are_deterministic() -> None:
	program = _cyclic_program()
	verifier = Verifier(program)
	decl = program.lookup("demo.C")
	first = [p.message for p in verifier.verify_type(decl)]
	assert first == [
		"Non-final field a from A in Immutable class C",
		"Non-final field b from B in Immutable class C",
	]
	for _ in range(3):
		assert [p.message for p in verifier.verify_type(decl)] == first


def test_candidate_is_always_first_scope() -> None:
	program = Program([TypeDecl(name="demo.Lone", superclass=TypeRef.declared("java.lang.Object"))])
	oracle = TraitOracle(program, HonoraryTable())
	closure = find_required_scopes(oracle, program.lookup("demo.Lone"), MarkerTrait.POWERLESS)
	assert [t.name for t in closure.scopes] == ["demo.Lone", "java.lang.Object"]


def test_honoring_superclass_is_trusted() -> None:
	program = Program(
		[
			TypeDecl(name="demo.Base", traits=frozenset({MarkerTrait.POWERLESS})),
			TypeDecl(name="demo.Sub", superclass=TypeRef.declared("demo.Base")),
		]
	)
	oracle = TraitOracle(program, HonoraryTable())
	closure = find_required_scopes(oracle, program.lookup("demo.Sub"), MarkerTrait.IMMUTABLE)
	assert [t.name for t in closure.scopes] == ["demo.Sub"]


def test_unresolved_superclass_is_recorded_and_reported() -> None:
	program = Program(
		[
			TypeDecl(
				name="demo.Orphan",
				traits=frozenset({MarkerTrait.IMMUTABLE}),
				superclass=TypeRef.declared("demo.Gone"),
			)
		]
	)
	oracle = TraitOracle(program, HonoraryTable())
	closure = find_required_scopes(oracle, program.lookup("demo.Orphan"), MarkerTrait.IMMUTABLE)
	assert [t.name for t in closure.scopes] == ["demo.Orphan"]
	assert [(u.ref.name, u.edge) for u in closure.unresolved] == [("demo.Gone", "superclass")]

	problems = Verifier(program).verify_type(program.lookup("demo.Orphan"))
	assert [p.message for p in problems] == [
		"Could not resolve superclass demo.Gone of Orphan in Immutable class Orphan"
	]


def test_static_nested_type_has_no_enclosing_edge() -> None:
	outer = TypeDecl(
		name="demo.Outer",
		fields=[FieldDecl(name="state", type_ref=TypeRef.primitive("int"))],
	)
	inner = TypeDecl(name="demo.Outer.Inner", enclosing="demo.Outer")
	nested = TypeDecl(name="demo.Outer.Nested", enclosing="demo.Outer", is_static_member=True)
	program = Program([outer, inner, nested], builtins=False)
	oracle = TraitOracle(program, HonoraryTable())
	assert [t.name for t in find_required_scopes(oracle, inner, MarkerTrait.IMMUTABLE).scopes] == [
		"demo.Outer.Inner",
		"demo.Outer",
	]
	assert [t.name for t in find_required_scopes(oracle, nested, MarkerTrait.IMMUTABLE).scopes] == [
		"demo.Outer.Nested"
	]
