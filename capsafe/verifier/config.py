# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Verifier configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from capsafe.model.program import ENUM_TYPE, TOKEN_TYPE
from capsafe.traits.honoraries import HonoraryTable


@dataclass(frozen=True)
class VerifierConfig:
	"""
	Knobs shared by every pass of one verifier instance.

	`token_type` and `enum_type` are the only roots under which reference
	equality is allowed. The list is explicit: it encodes a policy, so it is
	not inferred from the type graph.
	"""

	reserved_package_prefix: str = "org.joe_e."
	token_type: str = TOKEN_TYPE
	enum_type: str = ENUM_TYPE
	honoraries: HonoraryTable = field(default_factory=HonoraryTable)
	# Types with no structural claim still may not hold mutable or
	# authority-bearing static state.
	check_static_state: bool = True

	@property
	def identity_roots(self) -> Tuple[str, ...]:
		return (self.token_type, self.enum_type)


__all__ = ["VerifierConfig"]
