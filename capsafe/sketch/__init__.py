# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
capsafe.sketch: a small declaration language for describing program models.

Sketches are what the tests and the CLI feed to the verifier; a real
front-end would build the same `capsafe.model` objects directly.
"""

from .loader import SketchSyntaxError, load_program, load_sketch, load_sketch_file

__all__ = [
	"SketchSyntaxError",
	"load_program",
	"load_sketch",
	"load_sketch_file",
]
