"""Repository map: a line-oriented structure extractor for source trees.

Modules:
- fs_scan.py: Glob resolution, reading and dispatch of source files.
- brace_parse.py: Structure builder for TypeScript/JavaScript files.
- indent_parse.py: Structure builder for Python files.
- matchers.py: One regex matcher per recognized construct.
- heuristics.py: Complexity, error-handling, data-flow and other hints.
- model.py: Data structures for the extracted facts.
- summarize.py: Deterministic rendering of the repository map.
- report.py: Guarded write of the rendered map.
- manifest.py, runner.py: Application manifest and code2prompt helpers.
"""

__all__ = [
	"fs_scan",
	"brace_parse",
	"indent_parse",
	"matchers",
	"heuristics",
	"model",
	"summarize",
	"report",
	"manifest",
	"runner",
]
