"""
Axis-aligned bounds of a decoded GLB scene.

glTF defines one world unit as one meter, so the extents returned here are
used as meters without conversion.
"""
import numpy as np
import trimesh
from pygltflib import GLTF2, Accessor, Node, Scene

from ar_glb.errors import NoSceneError
from ar_glb.models.scaling import ModelDimensions

_COMPONENT_DTYPES = {
    5120: np.int8,
    5121: np.uint8,
    5122: np.int16,
    5123: np.uint16,
    5125: np.uint32,
    5126: np.float32,
}


def select_scene(gltf: GLTF2) -> Scene:
    """Return the default scene, falling back to the first declared one."""
    scenes = gltf.scenes or []
    if gltf.scene is not None and 0 <= gltf.scene < len(scenes):
        return scenes[gltf.scene]
    if scenes:
        return scenes[0]
    raise NoSceneError("GLB has no scene")


def local_matrix(node: Node) -> np.ndarray:
    if node.matrix is not None:
        # glTF matrices are column-major
        return np.array(node.matrix, dtype=np.float64).reshape(4, 4).T

    translation = node.translation or [0.0, 0.0, 0.0]
    x, y, z, w = node.rotation or [0.0, 0.0, 0.0, 1.0]
    scale = node.scale or [1.0, 1.0, 1.0]

    matrix = trimesh.transformations.translation_matrix(translation)
    matrix = matrix @ trimesh.transformations.quaternion_matrix([w, x, y, z])
    return matrix @ np.diag([scale[0], scale[1], scale[2], 1.0])


def _read_positions(gltf: GLTF2, accessor: Accessor) -> np.ndarray | None:
    """Decode a POSITION accessor from the GLB binary chunk."""
    if accessor.bufferView is None or not accessor.count:
        return None
    view = gltf.bufferViews[accessor.bufferView]
    buffer = gltf.buffers[view.buffer]
    if buffer.uri is not None:
        # External and data-URI buffers are not fetched
        return None
    blob = gltf.binary_blob()
    if not blob:
        return None

    dtype = np.dtype(_COMPONENT_DTYPES[accessor.componentType]).newbyteorder("<")
    stride = view.byteStride or dtype.itemsize * 3
    positions = np.ndarray(
        shape=(accessor.count, 3),
        dtype=dtype,
        buffer=blob,
        offset=(view.byteOffset or 0) + (accessor.byteOffset or 0),
        strides=(stride, dtype.itemsize),
    ).astype(np.float64)

    if accessor.normalized and dtype.kind in "iu":
        info = np.iinfo(dtype)
        positions = np.maximum(positions / info.max, -1.0)
    return positions


def _primitive_bounds(gltf: GLTF2, accessor_index: int) -> np.ndarray | None:
    accessor = gltf.accessors[accessor_index]
    if accessor.min is not None and accessor.max is not None:
        if len(accessor.min) >= 3 and len(accessor.max) >= 3:
            return np.array([accessor.min[:3], accessor.max[:3]], dtype=np.float64)

    positions = _read_positions(gltf, accessor)
    if positions is None or len(positions) == 0:
        return None
    return np.array([positions.min(axis=0), positions.max(axis=0)])


def scene_bounds(gltf: GLTF2, scene: Scene) -> np.ndarray | None:
    """
    World-space bounds of every mesh in ``scene`` as a (2, 3) array of
    [min, max], or None when the scene holds no geometry.
    """
    world_min = np.full(3, np.inf)
    world_max = np.full(3, -np.inf)
    found = False

    visited: set[int] = set()
    stack = [(index, np.eye(4)) for index in (scene.nodes or [])]
    while stack:
        node_index, parent_matrix = stack.pop()
        if node_index in visited:
            continue
        visited.add(node_index)

        node = gltf.nodes[node_index]
        world = parent_matrix @ local_matrix(node)

        if node.mesh is not None:
            for primitive in gltf.meshes[node.mesh].primitives:
                position = primitive.attributes.POSITION
                if position is None:
                    continue
                bounds = _primitive_bounds(gltf, position)
                if bounds is None:
                    continue
                corners = trimesh.transformations.transform_points(
                    trimesh.bounds.corners(bounds), world
                )
                world_min = np.minimum(world_min, corners.min(axis=0))
                world_max = np.maximum(world_max, corners.max(axis=0))
                found = True

        for child in node.children or []:
            stack.append((child, world))

    if not found:
        return None
    return np.array([world_min, world_max])


def extract_bounds(gltf: GLTF2) -> ModelDimensions:
    scene = select_scene(gltf)
    bounds = scene_bounds(gltf, scene)
    if bounds is None:
        return ModelDimensions(width=0.0, height=0.0, depth=0.0)

    # Degenerate boxes collapse to zero rather than going negative
    extents = np.clip(bounds[1] - bounds[0], 0.0, None)
    return ModelDimensions(
        width=float(extents[0]),
        height=float(extents[1]),
        depth=float(extents[2]),
    )
