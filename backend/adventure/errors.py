from __future__ import annotations


class AdventureError(RuntimeError):
    """Base error for scene tree operations (fail fast, tree left untouched)."""


class FullSceneError(AdventureError):
    """The target scene already holds three children."""


class NoSuchNodeError(AdventureError):
    """The requested scene, slot or parent does not exist."""
