"""Class I icosahedron LCD truncation generator."""

__all__ = ["configurations", "export", "linalg", "parameters", "pipeline", "search", "spherical", "symmetry", "trig", "vertices"]
