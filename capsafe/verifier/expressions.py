# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expression checker: node-level bans of the safe subset.

Rules:
- reference equality (`==`/`!=`) is only allowed on values (primitives,
  null) or when one side is a Token or an enum;
- native methods are forbidden;
- packages may not live in the verifier's reserved namespace.

The walk is iterative and pre-order over every node of the unit. A
violation appends a problem and the walk goes on.
"""

from __future__ import annotations

from typing import List

from capsafe.core.diagnostics import Problem, ProblemSink
from capsafe.core.span import Span
from capsafe.model.nodes import Binary, BinaryOp, CompilationUnit, Expr, MethodDecl, Node, iter_children
from capsafe.model.types import RefKind, TypeRef
from .config import VerifierConfig
from .hierarchy import TraitOracle


class ExpressionChecker:
	def __init__(self, oracle: TraitOracle, config: VerifierConfig, sink: ProblemSink) -> None:
		self.oracle = oracle
		self.config = config
		self.sink = sink

	def check_unit(self, unit: CompilationUnit) -> None:
		self._check_packages(unit)
		stack: List[Node] = list(reversed(unit.types))
		while stack:
			node = stack.pop()
			if isinstance(node, MethodDecl):
				self._check_method(node)
			elif isinstance(node, Binary) and node.op.is_equality:
				self._check_equality(node)
			stack.extend(reversed(list(iter_children(node))))

	def _check_packages(self, unit: CompilationUnit) -> None:
		if len(unit.packages) > 1:
			self.sink.error("More than one package declaration", unit.packages[1].span, code="E-MULTIPLE-PACKAGES")
		if not unit.packages:
			return
		pkg = unit.packages[0]
		prefix = self.config.reserved_package_prefix
		if prefix and (pkg.name + ".").startswith(prefix):
			self.sink.error(
				f"Bad package name {pkg.name}: the {prefix.rstrip('.')} namespace is reserved",
				pkg.span,
				code="E-RESERVED-PACKAGE",
			)

	def _check_method(self, method: MethodDecl) -> None:
		if method.is_native:
			self.sink.error(f"Native method {method.name}", method.span, code="E-NATIVE-METHOD")

	def _check_equality(self, node: Binary) -> None:
		sym = "==" if node.op is BinaryOp.EQ else "!="
		left = node.left.static_type
		if left.is_value:
			return
		if left.kind is RefKind.ARRAY:
			self.sink.error(f"{sym} used to compare arrays by reference", node.span, code="E-REF-EQ-ARRAY")
			return
		if left.kind is RefKind.TYPEVAR:
			self.sink.error(
				f"{sym} used to compare generic-typed values by reference",
				node.span,
				code="E-REF-EQ-TYPEVAR",
			)
			return
		right = node.right.static_type
		# Auto-unboxing: a boxed value compared against a primitive is a value comparison.
		if right.is_value:
			return
		left_safe = self._reaches_identity_root(node.left)
		right_safe = self._reaches_identity_root(node.right)
		if left_safe or right_safe:
			return
		self.sink.error(f"{sym} used on a non-identity-safe type", node.span, code="E-REF-EQ-IDENTITY")

	def _reaches_identity_root(self, operand: Expr) -> bool:
		ref: TypeRef = operand.static_type
		if ref.kind not in (RefKind.DECLARED, RefKind.UNRESOLVED):
			return False
		roots = self.config.identity_roots
		if ref.name in roots:
			return True
		decl = self.oracle.program.resolve(ref)
		if decl is None:
			self.sink.error(f"Could not resolve type {ref}", operand.span or Span(), code="E-UNRESOLVED-TYPE")
			return False
		return any(self.oracle.reaches(decl, root) for root in roots)


def check_expressions(oracle: TraitOracle, config: VerifierConfig, unit: CompilationUnit) -> List[Problem]:
	sink = ProblemSink()
	ExpressionChecker(oracle, config, sink).check_unit(unit)
	return list(sink)


__all__ = ["ExpressionChecker", "check_expressions"]
