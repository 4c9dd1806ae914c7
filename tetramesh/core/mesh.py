"""Indexed triangle mesh built from extracted triangles, with PLY/OBJ/STL export."""

import numpy as np
from pathlib import Path
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .geometry import Triangle, triangles_to_array


@dataclass
class TriangleMesh:
    """Triangle mesh with shared vertices.

    Stores vertices, faces, and per-vertex normals.
    """
    vertices: np.ndarray  # (N, 3) float32
    faces: np.ndarray     # (M, 3) int32 - vertex indices
    normals: Optional[np.ndarray] = None  # (N, 3)
    name: str = "isosurface"

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float32).reshape(-1, 3)
        self.faces = np.asarray(self.faces, dtype=np.int32).reshape(-1, 3)
        if self.normals is None:
            self.compute_normals()

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    @property
    def n_faces(self) -> int:
        return len(self.faces)

    def compute_normals(self):
        """Compute per-vertex normals from faces (area weighted)."""
        self.normals = np.zeros_like(self.vertices)
        if self.n_faces == 0:
            return

        tri = self.vertices[self.faces]
        face_normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
        for k in range(3):
            np.add.at(self.normals, self.faces[:, k], face_normals)

        # Normalize
        norms = np.linalg.norm(self.normals, axis=1, keepdims=True)
        norms = np.maximum(norms, 1e-8)
        self.normals /= norms

    def get_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Get axis-aligned bounding box (min, max)."""
        if self.n_vertices == 0:
            raise ValueError("Empty mesh has no bounds")
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    @classmethod
    def from_triangles(cls, triangles: Sequence[Triangle], merge: bool = True,
                       tolerance: float = 1e-6, name: str = "isosurface") -> "TriangleMesh":
        """Build a mesh from a triangle soup.

        Args:
            triangles: Extracted triangles
            merge: Weld vertices closer than tolerance
            tolerance: Welding grid size
        """
        soup = triangles_to_array(triangles).reshape(-1, 3)
        faces = np.arange(len(soup), dtype=np.int32).reshape(-1, 3)
        if merge and len(soup) > 0:
            soup, faces = cls._merge_vertices(soup, faces, tolerance)
        return cls(vertices=soup, faces=faces, name=name)

    @staticmethod
    def _merge_vertices(vertices: np.ndarray, faces: np.ndarray,
                        tolerance: float = 1e-6) -> Tuple[np.ndarray, np.ndarray]:
        """Merge duplicate vertices."""
        # Round to tolerance
        rounded = np.round(vertices / tolerance) * tolerance

        # Find unique vertices
        unique, inverse = np.unique(rounded, axis=0, return_inverse=True)

        # Remap faces
        new_faces = inverse.reshape(-1)[faces]

        return unique.astype(np.float32), new_faces.astype(np.int32)

    def save_ply(self, filepath: str, binary: bool = True):
        """Save mesh as PLY (binary little endian or ASCII)."""
        fmt = "binary_little_endian" if binary else "ascii"
        header = (
            "ply\n"
            f"format {fmt} 1.0\n"
            f"comment {self.name}\n"
            f"element vertex {self.n_vertices}\n"
            "property float x\n"
            "property float y\n"
            "property float z\n"
            f"element face {self.n_faces}\n"
            "property list uchar int vertex_indices\n"
            "end_header\n"
        )

        with open(filepath, "wb") as f:
            f.write(header.encode("ascii"))
            if binary:
                f.write(self.vertices.astype("<f4").tobytes())
                face_dtype = np.dtype([("n", "u1"), ("idx", "<i4", (3,))])
                records = np.empty(self.n_faces, dtype=face_dtype)
                records["n"] = 3
                records["idx"] = self.faces
                f.write(records.tobytes())
            else:
                lines = [f"{v[0]:.6f} {v[1]:.6f} {v[2]:.6f}" for v in self.vertices]
                lines += [f"3 {a} {b} {c}" for a, b, c in self.faces]
                f.write(("\n".join(lines) + "\n").encode("ascii") if lines else b"")

    @classmethod
    def load_ply(cls, filepath: str, name: Optional[str] = None) -> "TriangleMesh":
        """Load a triangle PLY written by save_ply."""
        filepath = Path(filepath)
        if name is None:
            name = filepath.stem

        with open(filepath, "rb") as f:
            fmt = None
            n_vertices = n_faces = 0
            while True:
                line = f.readline().decode("ascii").strip()
                if not line:
                    raise ValueError(f"Truncated PLY header: {filepath}")
                parts = line.split()
                if parts[0] == "format":
                    fmt = parts[1]
                elif parts[0] == "element" and parts[1] == "vertex":
                    n_vertices = int(parts[2])
                elif parts[0] == "element" and parts[1] == "face":
                    n_faces = int(parts[2])
                elif parts[0] == "end_header":
                    break
            body = f.read()

        if fmt == "binary_little_endian":
            vert_bytes = n_vertices * 12
            vertices = np.frombuffer(body, dtype="<f4", count=n_vertices * 3).reshape(-1, 3)
            face_dtype = np.dtype([("n", "u1"), ("idx", "<i4", (3,))])
            if n_faces:
                records = np.frombuffer(body, dtype=face_dtype, count=n_faces, offset=vert_bytes)
                faces = records["idx"]
            else:
                faces = np.zeros((0, 3), dtype=np.int32)
        elif fmt == "ascii":
            rows = body.decode("ascii").split("\n")
            vertices = np.array([[float(x) for x in r.split()] for r in rows[:n_vertices]],
                                dtype=np.float32).reshape(-1, 3)
            faces = np.array([[int(x) for x in r.split()[1:4]]
                              for r in rows[n_vertices:n_vertices + n_faces]],
                             dtype=np.int32).reshape(-1, 3)
        else:
            raise ValueError(f"Unsupported PLY format: {fmt}")

        return cls(vertices=vertices, faces=faces, name=name)

    def save_obj(self, filepath: str):
        """Save mesh as Wavefront OBJ."""
        with open(filepath, "w") as f:
            f.write(f"# {self.name}\n")
            for v in self.vertices:
                f.write(f"v {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}\n")
            for n in self.normals:
                f.write(f"vn {n[0]:.6f} {n[1]:.6f} {n[2]:.6f}\n")
            for a, b, c in self.faces + 1:  # OBJ is 1-indexed
                f.write(f"f {a}//{a} {b}//{b} {c}//{c}\n")

    def save_stl(self, filepath: str):
        """Save mesh as binary STL."""
        tri = self.vertices[self.faces]
        face_normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
        norms = np.linalg.norm(face_normals, axis=1, keepdims=True)
        face_normals = face_normals / np.maximum(norms, 1e-8)

        record = np.dtype([
            ("normal", "<f4", (3,)),
            ("vertices", "<f4", (3, 3)),
            ("attr", "<u2"),
        ])
        data = np.zeros(self.n_faces, dtype=record)
        data["normal"] = face_normals
        data["vertices"] = tri

        with open(filepath, "wb") as f:
            f.write(self.name.encode("ascii", "replace")[:80].ljust(80, b" "))
            f.write(np.uint32(self.n_faces).tobytes())
            f.write(data.tobytes())

    def save(self, filepath: str, binary: bool = True):
        """Save mesh (format chosen by extension)."""
        ext = Path(filepath).suffix.lower()

        if ext == ".ply":
            self.save_ply(filepath, binary=binary)
        elif ext == ".obj":
            self.save_obj(filepath)
        elif ext == ".stl":
            self.save_stl(filepath)
        else:
            raise ValueError(f"Unsupported format: {ext}")
