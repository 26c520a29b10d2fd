"""State/store layer.

This package is the single source of truth for how the snapshot seed and
push-channel updates are merged into the live map projection.
"""
