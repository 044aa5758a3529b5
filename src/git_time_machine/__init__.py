"""Git Time Machine: interactive git history visualization and analysis.

Opens a local repository (or a temporary clone of a remote one) and browses
branches, commits, contributors and change statistics from a terminal menu.
"""

__version__ = "1.0.0"
