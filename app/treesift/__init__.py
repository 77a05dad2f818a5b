"""treesift - breadth-first filesystem name search.

Walks a directory subtree level by level, streams name matches to the
caller as they are found, and pauses at a configurable result cap so the
same traversal can be resumed later.
"""

__version__ = "0.1.0"
