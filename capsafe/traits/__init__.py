# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .markers import (
	MARKER_PACKAGE,
	MarkerTrait,
	implied_by,
	implies_closure,
	minimal_claims,
)
from .honoraries import (
	DEFAULT_GRANTS,
	HonoraryConfigError,
	HonoraryTable,
	load_honoraries_json,
)

__all__ = [
	"MARKER_PACKAGE",
	"MarkerTrait",
	"implied_by",
	"implies_closure",
	"minimal_claims",
	"DEFAULT_GRANTS",
	"HonoraryConfigError",
	"HonoraryTable",
	"load_honoraries_json",
]
