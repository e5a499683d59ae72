# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Verifier driver over several compilation units."""

from capsafe.model import Program
from capsafe.sketch import load_sketch
from capsafe.verifier import Verifier


def test_units_are_verified_independently() -> None:
	good = load_sketch("package demo;\nclass Peer implements Immutable { final int x; }\n", path="peer.sketch")
	bad = load_sketch(
		"package demo;\nclass User implements Immutable { final Peer peer; int hits; }\n",
		path="user.sketch",
	)
	program = Program.from_units([good, bad])
	results = Verifier(program).verify_units(program.units)
	assert [r.unit.path for r in results] == ["peer.sketch", "user.sketch"]
	assert results[0].ok
	assert not results[1].ok
	[problem] = results[1].problems
	assert problem.message == "Non-final field hits in Immutable class User"
	assert problem.span.file == "user.sketch"


def test_type_problems_come_before_expression_problems() -> None:
	unit = load_sketch(
		"""
		package demo;
		class Gadget implements Powerless {
			int uses;
			native void zap();
		}
		"""
	)
	program = Program.from_units([unit])
	problems = Verifier(program).verify_unit(unit)
	assert [p.code for p in problems] == ["E-FIELD-NOT-FINAL", "E-NATIVE-METHOD"]


def test_builtin_declarations_are_not_verified() -> None:
	program = Program()
	verifier = Verifier(program)
	assert all(verifier.verify_type(decl) == [] for decl in program)
