"""
Triangulated mesh construction from a finished heightfield.

Vertices are enumerated with x as the outer loop and y as the inner loop,
so the vertex for cell (x, y) has index ``x * height + y``. Each grid quad
becomes two triangles wound the same way, which makes the face normals of a
flat field point along +Y.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from typing import Any, Dict

from .heightfield import as_heightfield
from .height_classifier import colors_for_heights

logger = structlog.get_logger()

DEFAULT_HEIGHT_SCALE = 50.0

_UP = np.array([0.0, 1.0, 0.0])


@dataclass
class Mesh:
    """Parallel vertex arrays plus a flat triangle index list."""

    positions: np.ndarray  # (N, 3)
    triangles: np.ndarray  # (T * 3,)
    uvs: np.ndarray  # (N, 2)
    colors: np.ndarray  # (N, 4) RGBA
    normals: np.ndarray  # (N, 3)
    width: int
    height: int

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation."""
        return {
            "width": self.width,
            "height": self.height,
            "positions": self.positions.tolist(),
            "triangles": self.triangles.tolist(),
            "uvs": self.uvs.tolist(),
            "colors": self.colors.tolist(),
            "normals": self.normals.tolist(),
        }


def quad_triangles(width: int, height: int) -> np.ndarray:
    """Flat triangle index list covering a width x height vertex grid."""
    xs = np.arange(width - 1, dtype=np.int64)
    ys = np.arange(height - 1, dtype=np.int64)
    origin = (xs[:, None] * height + ys[None, :]).ravel()

    v00 = origin
    v01 = origin + 1
    v10 = origin + height
    v11 = origin + height + 1

    return np.stack([v00, v11, v10, v00, v01, v11], axis=1).ravel()


def compute_normals(positions: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Smooth per-vertex normals.

    Each vertex normal is the normalized sum of the unit face normals of
    the triangles that use it. Vertices without a usable face fall back
    to +Y.
    """
    normals = np.zeros_like(positions, dtype=np.float64)

    if triangles.size:
        faces = triangles.reshape(-1, 3)
        p0 = positions[faces[:, 0]]
        p1 = positions[faces[:, 1]]
        p2 = positions[faces[:, 2]]

        face_normals = np.cross(p1 - p0, p2 - p0)
        lengths = np.linalg.norm(face_normals, axis=1, keepdims=True)
        face_normals = np.divide(
            face_normals, lengths, out=np.zeros_like(face_normals), where=lengths > 0
        )

        for corner in range(3):
            np.add.at(normals, faces[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    normals = np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)
    normals[lengths[:, 0] == 0] = _UP

    return normals


class MeshBuilder:
    """Builds render-ready meshes from normalized heightfields."""

    def __init__(self, height_scale: float = DEFAULT_HEIGHT_SCALE):
        self.height_scale = height_scale

    def build(self, field: np.ndarray) -> Mesh:
        """
        Convert a heightfield to a mesh.

        Args:
            field: Normalized heightfield of shape (width, height)

        Returns:
            Mesh with width * height vertices and (width-1)*(height-1)*2 triangles
        """
        heights = as_heightfield(field)
        width, height = heights.shape

        grid_x, grid_y = np.meshgrid(
            np.arange(width, dtype=np.float64),
            np.arange(height, dtype=np.float64),
            indexing="ij",
        )
        flat_heights = heights.ravel()

        positions = np.stack(
            [grid_x.ravel(), flat_heights * self.height_scale, grid_y.ravel()], axis=1
        )
        uvs = np.stack([grid_x.ravel() / width, grid_y.ravel() / height], axis=1)
        colors = colors_for_heights(flat_heights)
        triangles = quad_triangles(width, height)
        normals = compute_normals(positions, triangles)

        logger.debug(
            "Mesh built",
            vertices=len(positions),
            triangles=len(triangles) // 3,
        )

        return Mesh(
            positions=positions,
            triangles=triangles,
            uvs=uvs,
            colors=colors,
            normals=normals,
            width=width,
            height=height,
        )


def build_mesh(field: np.ndarray, height_scale: float = DEFAULT_HEIGHT_SCALE) -> Mesh:
    """Build a mesh with the given vertical scale."""
    return MeshBuilder(height_scale).build(field)
