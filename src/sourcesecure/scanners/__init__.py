"""Scanner module for sourcesecure.

Sources of findings beyond the plain file tree: archive contents, an
external secret scanner, and git history.
"""
