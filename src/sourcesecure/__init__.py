"""sourcesecure - secret detection for source trees.

sourcesecure walks a directory tree (including archive contents and,
optionally, git history), applies pattern and heuristic detectors to
file content, reconciles findings from several detection sources and
classifies them by severity.
"""

__version__ = "1.0.0"
