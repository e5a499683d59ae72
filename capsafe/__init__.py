# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
capsafe: static verifier for a capability-safe subset of an object-oriented
language.

Packages:
  - core: Problem/Span records and the per-unit ProblemSink
  - traits: marker trait lattice and honorary grants
  - model: program model (type declarations, fields, expression trees)
  - verifier: closure finder, field verifier, expression checker, driver
  - sketch: lark-based loader for model sketches (tests and CLI)
"""

__version__ = "0.1.0"

__all__ = [
	"core",
	"traits",
	"model",
	"verifier",
	"sketch",
]
