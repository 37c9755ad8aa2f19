"""Content resolution and navigation core.

Everything here operates on immutable, pre-loaded content and performs no I/O
apart from the repository load step.
"""
