"""tetramesh — marching tetrahedra isosurface extraction."""

__version__ = "0.1.0"
