# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .config import VerifierConfig
from .hierarchy import Honor, SupertypeWalk, TraitOracle
from .closure import ScopeClosure, UnresolvedEdge, find_required_scopes
from .fields import check_static_state, verify_fields
from .expressions import ExpressionChecker, check_expressions
from .driver import UnitResult, Verifier, verify_program

__all__ = [
	"VerifierConfig",
	"Honor",
	"SupertypeWalk",
	"TraitOracle",
	"ScopeClosure",
	"UnresolvedEdge",
	"find_required_scopes",
	"check_static_state",
	"verify_fields",
	"ExpressionChecker",
	"check_expressions",
	"UnitResult",
	"Verifier",
	"verify_program",
]
