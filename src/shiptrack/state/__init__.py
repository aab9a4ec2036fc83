"""State/store layer.

This package is the single source of truth for the last-known-good
tracking state of the current subject.
"""
