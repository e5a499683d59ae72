# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Field rules of structural trait claims."""

from typing import List, Optional

from capsafe.core.diagnostics import Problem
from capsafe.sketch import load_program
from capsafe.traits import HonoraryTable, MarkerTrait
from capsafe.verifier import VerifierConfig, verify_program


def _verify(src: str, config: Optional[VerifierConfig] = None) -> List[Problem]:
	program = load_program([(None, src)])
	results = verify_program(program, config)
	assert len(results) == 1
	return results[0].problems


def _messages(problems: List[Problem]) -> List[str]:
	return [p.message for p in problems]


def test_conforming_immutable_class_has_no_problems() -> None:
	src = """
	package demo;
	class Point implements Immutable {
		final int x;
		final String label;
		final Point next;
	}
	"""
	assert _verify(src) == []


def test_non_final_field_anchors_at_field_name() -> None:
	src = "package demo;\nclass Counter implements Powerless { int count; }\n"
	problems = _verify(src)
	assert _messages(problems) == ["Non-final field count in Powerless class Counter"]
	assert problems[0].code == "E-FIELD-NOT-FINAL"
	assert problems[0].severity == "error"
	assert problems[0].span.start == src.index("count")
	assert problems[0].span.length == len("count")


def test_final_field_of_non_honoring_type_is_reported() -> None:
	src = """
	package demo;
	class Box { int value; }
	class Holder implements Immutable { final Box box; }
	"""
	assert _messages(_verify(src)) == ["Non-Immutable field box in Immutable class Holder"]


def test_array_and_type_variable_fields_never_honor_a_trait() -> None:
	src = """
	package demo;
	class Grid implements Immutable {
		final int[][] cells;
		final $T item;
	}
	"""
	assert _messages(_verify(src)) == [
		"Non-Immutable field cells in Immutable class Grid",
		"Non-Immutable field item in Immutable class Grid",
	]


def test_inherited_field_anchors_at_candidate_and_names_origin() -> None:
	src = """
	package demo;
	class Base { int hits; }
	class Derived extends Base implements Immutable { final int y; }
	"""
	problems = _verify(src)
	assert _messages(problems) == ["Non-final field hits from Base in Immutable class Derived"]
	assert problems[0].span.start == src.index("Derived")


def test_superclass_with_weaker_claim_is_rechecked() -> None:
	src = """
	package demo;
	class Base implements Immutable { final Box box; }
	class Box implements Immutable { }
	class Derived extends Base implements Powerless { final String name; }
	"""
	# Base only claims Immutable, so its fields are checked for Powerless
	# through Derived's closure.
	assert _messages(_verify(src)) == ["Non-Powerless field box from Base in Powerless class Derived"]


def test_trusted_superclass_is_not_expanded() -> None:
	src = """
	package demo;
	class Base implements Powerless { int hits; }
	class Derived extends Base implements Immutable { }
	"""
	# Only Base reports its own field; Derived trusts its Powerless superclass.
	assert _messages(_verify(src)) == ["Non-final field hits in Powerless class Base"]


def test_inner_class_sees_enclosing_instance_fields() -> None:
	src = """
	package demo;
	class Outer {
		int mutable;
		class Inner implements Immutable { }
		static class Nested implements Immutable { }
	}
	"""
	problems = _verify(src)
	assert _messages(problems) == ["Non-final field mutable from Outer in Immutable class Inner"]
	assert problems[0].span.start == src.index("Inner")


def test_interface_claims_are_not_verified() -> None:
	src = """
	package demo;
	interface Shape extends Immutable {
		int SIDES = 4;
	}
	"""
	assert _verify(src) == []


def test_static_field_in_claiming_class() -> None:
	src = "package demo;\nclass Conf implements Immutable { static int hits; }\n"
	problems = _verify(src)
	assert _messages(problems) == ["Non-final static field hits in Immutable class Conf"]
	assert problems[0].code == "E-STATIC-NOT-FINAL"


def test_unresolved_field_type_reports_both_problems() -> None:
	src = """
	package demo;
	class Money implements Powerless { final java.math.BigInteger amount; }
	"""
	assert _messages(_verify(src)) == [
		"Could not resolve type java.math.BigInteger of field amount",
		"Non-Powerless field amount in Powerless class Money",
	]


def test_honorary_grant_trusts_library_type() -> None:
	src = """
	package demo;
	class Money implements Powerless { final java.math.BigInteger amount; }
	"""
	honoraries = HonoraryTable().merged({"java.math.BigInteger": [MarkerTrait.POWERLESS]})
	assert _verify(src, VerifierConfig(honoraries=honoraries)) == []


def test_bad_deep_frozen_sample() -> None:
	src = """
	package test;
	class ExtendsToken extends Token { }
	class BadDeepFrozen implements Immutable {
		static Object foo;
		final String qzar;
		final Token fooTok;
		final ExtendsToken barTok;
		final int[] foop;
	}
	"""
	assert _messages(_verify(src)) == [
		"Non-final static field foo in Immutable class BadDeepFrozen",
		"Non-Immutable field foop in Immutable class BadDeepFrozen",
	]


def test_bad_enumeration_sample() -> None:
	src = """
	package test;
	enum BadEnumeration implements Incapable {
		foo(0, 1), bar(0, 2), baz(1, 3);

		final int q;
		int z;

		int fib(int n) { return q + z; }
	}
	"""
	assert _messages(_verify(src)) == ["Non-final field z in Powerless class BadEnumeration"]


def test_synthetic_fields_are_exempt() -> None:
	src = "package demo;\nclass Lambda implements Immutable { synthetic int capture; }\n"
	assert _verify(src) == []
