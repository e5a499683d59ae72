# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line host for the verifier.

Loads model sketches, verifies every unit and reports problems either as
`file:line:column: error: message` lines on stderr or, with --json, as one
JSON document on stdout.

Exit codes: 0 when no problems, 1 when the verifier reported problems,
2 when an input could not be loaded.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from capsafe.core.diagnostics import Problem
from capsafe.model.program import Program
from capsafe.sketch import SketchSyntaxError, load_sketch_file
from capsafe.traits.honoraries import HonoraryConfigError, HonoraryTable, load_honoraries_json
from capsafe.verifier import Verifier, VerifierConfig

logger = logging.getLogger(__name__)


def _problem_to_json(problem: Problem, source: Optional[Path]) -> dict:
	"""Render a Problem to a JSON-friendly dict."""
	span = problem.span
	file = span.file or (str(source) if source is not None else None)
	return {
		"phase": problem.phase or "verify",
		"code": problem.code,
		"message": problem.message,
		"severity": problem.severity,
		"file": file,
		"line": span.line,
		"column": span.column,
		"start": span.start,
		"length": span.length,
		"notes": list(problem.notes),
	}


def _print_text(problems: List[Problem], source: Optional[Path]) -> None:
	for p in problems:
		file = p.span.file or (str(source) if source is not None else "<input>")
		line = p.span.line if p.span.line is not None else "?"
		column = p.span.column if p.span.column is not None else "?"
		print(f"{file}:{line}:{column}: {p.severity}: {p.message}", file=sys.stderr)


def _emit(problems: List[Problem], *, as_json: bool, exit_code: int, source: Optional[Path] = None) -> int:
	if as_json:
		payload = {
			"exit_code": exit_code,
			"problems": [_problem_to_json(p, source) for p in problems],
		}
		print(json.dumps(payload))
	else:
		_print_text(problems, source)
	return exit_code


def build_config(args: argparse.Namespace) -> VerifierConfig:
	honoraries = HonoraryTable()
	if args.honoraries is not None:
		honoraries = honoraries.merged(load_honoraries_json(args.honoraries))
	return VerifierConfig(
		reserved_package_prefix=args.reserved_prefix,
		honoraries=honoraries,
		check_static_state=args.static_state,
	)


def main(argv: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(prog="capsafe", description="Verify model sketches against the capability-safe subset")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to model sketch file(s)")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit problems as JSON (phase/code/message/severity/file/line/column/start/length)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log verifier progress to stderr")
	parser.add_argument("--honoraries", type=Path, help="JSON file with extra honorary trait grants")
	parser.add_argument(
		"--reserved-prefix",
		default=VerifierConfig.reserved_package_prefix,
		help="Package prefix user code may not use (default: %(default)s)",
	)
	parser.add_argument(
		"--no-static-state",
		dest="static_state",
		action="store_false",
		default=True,
		help="Do not check static fields of types without a trait claim",
	)
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
	)

	try:
		config = build_config(args)
	except (HonoraryConfigError, OSError) as err:
		problem = Problem(message=str(err), phase="config")
		return _emit([problem], as_json=args.json, exit_code=2, source=args.honoraries)

	program = Program()
	load_problems: List[Problem] = []
	for path in args.source:
		try:
			program.add_unit(load_sketch_file(path))
		except SketchSyntaxError as err:
			load_problems.append(Problem(message=str(err), span=err.loc.with_file(str(path)), phase="sketch"))
		except OSError as err:
			load_problems.append(Problem(message=f"cannot read {path}: {err.strerror or err}", phase="sketch"))
		except UnicodeDecodeError as err:
			load_problems.append(Problem(message=f"cannot read {path}: not valid UTF-8 ({err.reason})", phase="sketch"))
	if load_problems:
		return _emit(load_problems, as_json=args.json, exit_code=2, source=args.source[0])

	verifier = Verifier(program, config)
	problems: List[Problem] = []
	for result in verifier.verify_units(program.units):
		logger.debug("%s: %d problem(s)", result.unit.path, len(result.problems))
		problems.extend(result.problems)
	return _emit(problems, as_json=args.json, exit_code=1 if problems else 0, source=args.source[0])


__all__ = ["main", "build_config"]
