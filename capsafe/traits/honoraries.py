# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Honorary trait grants.

Library types whose internals the verifier cannot (or will not) re-check
are trusted to satisfy a fixed set of traits. Grants are keyed by qualified
type name; anything not listed is never assumed safe.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping

from .markers import MarkerTrait, implies_closure


_VALUE_TRAITS = frozenset(
	{MarkerTrait.IMMUTABLE, MarkerTrait.POWERLESS, MarkerTrait.RECORD, MarkerTrait.DATA}
)

DEFAULT_GRANTS: Mapping[str, FrozenSet[MarkerTrait]] = MappingProxyType(
	{
		"java.lang.String": _VALUE_TRAITS,
		"java.lang.Integer": _VALUE_TRAITS,
		"java.lang.Character": _VALUE_TRAITS,
		"java.lang.Enum": frozenset({MarkerTrait.EQUATABLE}),
	}
)


class HonoraryConfigError(ValueError):
	"""Raised when an honorary grant file is malformed."""


class HonoraryTable:
	"""
	Read-only table of honorary grants.

	Granted sets are closed under implication when the table is built, so a
	lookup never has to consult the lattice.
	"""

	def __init__(self, grants: Mapping[str, Iterable[MarkerTrait]] | None = None) -> None:
		source = DEFAULT_GRANTS if grants is None else grants
		self._grants: Dict[str, FrozenSet[MarkerTrait]] = {
			name: implies_closure(traits) for name, traits in source.items()
		}

	def is_honorary(self, type_name: str, trait: MarkerTrait) -> bool:
		"""True when `type_name` is trusted to satisfy `trait` without inspection."""
		granted = self._grants.get(type_name)
		return granted is not None and trait in granted

	def traits_of(self, type_name: str) -> FrozenSet[MarkerTrait]:
		return self._grants.get(type_name, frozenset())

	def merged(self, extra: Mapping[str, Iterable[MarkerTrait]]) -> "HonoraryTable":
		"""Return a new table with `extra` grants added (union per type)."""
		combined: Dict[str, FrozenSet[MarkerTrait]] = dict(self._grants)
		for name, traits in extra.items():
			combined[name] = combined.get(name, frozenset()) | frozenset(traits)
		return HonoraryTable(combined)

	def __contains__(self, type_name: object) -> bool:
		return type_name in self._grants

	def __len__(self) -> int:
		return len(self._grants)


def load_honoraries_json(path: Path) -> Dict[str, FrozenSet[MarkerTrait]]:
	"""
	Load extra honorary grants from a JSON file.

	Format (version 0):
	{
	  "format": "capsafe-honoraries",
	  "version": 0,
	  "grants": {
	    "java.math.BigInteger": ["Powerless", "Record"]
	  }
	}
	"""
	try:
		obj = json.loads(path.read_text(encoding="utf-8"))
	except UnicodeDecodeError as err:
		raise HonoraryConfigError(f"{path}: not valid UTF-8: {err.reason}") from err
	except json.JSONDecodeError as err:
		raise HonoraryConfigError(f"{path}: invalid JSON: {err}") from err
	if not isinstance(obj, dict):
		raise HonoraryConfigError("honorary grant file must be a JSON object")
	if obj.get("format") != "capsafe-honoraries" or obj.get("version") != 0:
		raise HonoraryConfigError("unsupported honorary grant file format/version")
	grants_obj = obj.get("grants") or {}
	if not isinstance(grants_obj, dict):
		raise HonoraryConfigError("honorary grants must be a JSON object")
	out: Dict[str, FrozenSet[MarkerTrait]] = {}
	for type_name, names in grants_obj.items():
		if not isinstance(type_name, str) or not type_name:
			raise HonoraryConfigError("honorary grant keys must be qualified type names")
		if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
			raise HonoraryConfigError(f"grants for '{type_name}' must be a list of trait names")
		try:
			out[type_name] = frozenset(MarkerTrait.from_name(n) for n in names)
		except ValueError as err:
			raise HonoraryConfigError(f"grants for '{type_name}': {err}") from err
	return out


__all__ = [
	"DEFAULT_GRANTS",
	"HonoraryConfigError",
	"HonoraryTable",
	"load_honoraries_json",
]
