import math
import struct

from pygltflib import GLTF2

from ar_glb.errors import DecodeError
from ar_glb.services.bounds import select_scene

GLB_MAGIC = b"glTF"
GLB_HEADER = struct.Struct("<4sII")


def decode_glb(data: bytes) -> GLTF2:
    """Parse GLB bytes into a glTF document, raising DecodeError on bad input."""
    if len(data) < GLB_HEADER.size:
        raise DecodeError(f"GLB is truncated ({len(data)} bytes)")

    magic, version, length = GLB_HEADER.unpack_from(data, 0)
    if magic != GLB_MAGIC:
        raise DecodeError("Not a GLB file (bad magic)")
    if version != 2:
        raise DecodeError(f"Unsupported GLB version {version}")
    if length > len(data):
        raise DecodeError(
            f"GLB declares {length} bytes but only {len(data)} were received"
        )

    try:
        gltf = GLTF2.load_from_bytes(data)
    except Exception as exc:
        raise DecodeError(f"Failed to parse GLB: {exc}") from exc
    if gltf is None:
        raise DecodeError("Failed to parse GLB")
    return gltf


def apply_scale(gltf: GLTF2, scale_factor: float) -> GLTF2:
    """
    Multiply the scale of every root node of the target scene by
    ``scale_factor``, in place.

    Existing scales are composed with the factor, not replaced. Children
    are left untouched and inherit the change through their parent.
    """
    if not math.isfinite(scale_factor) or scale_factor <= 0:
        raise ValueError(f"Scale factor must be a positive number, got {scale_factor}")

    scene = select_scene(gltf)
    for node_index in dict.fromkeys(scene.nodes or []):
        node = gltf.nodes[node_index]
        if node.matrix is not None:
            # Column-major: scaling the first three columns equals M * S
            node.matrix = [
                value * scale_factor if i < 12 else value
                for i, value in enumerate(node.matrix)
            ]
        else:
            current = node.scale or [1.0, 1.0, 1.0]
            node.scale = [axis * scale_factor for axis in current]
    return gltf


def encode_glb(gltf: GLTF2) -> bytes:
    return b"".join(gltf.save_to_bytes())
