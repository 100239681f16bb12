"""Pytest configuration and shared fixtures for the AR GLB backend tests."""

import struct
import sys
from pathlib import Path

import httpx
import numpy as np
import pytest
import trimesh

# Add project root to path for imports
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

from ar_glb.services.scaling_cache import InMemoryScalingCache  # noqa: E402

SOURCE_URL = "https://zenodo.org/records/4242/files/temple.glb"


def make_box_glb(extents, translation=None) -> bytes:
    """Export a single box as GLB bytes."""
    box = trimesh.creation.box(extents=extents)
    box.visual.vertex_colors = np.tile([255, 127, 80, 255], (len(box.vertices), 1))
    transform = None
    if translation is not None:
        transform = trimesh.transformations.translation_matrix(translation)
    scene = trimesh.Scene()
    scene.add_geometry(box, transform=transform)
    return scene.export(file_type="glb")


def make_json_glb(document: bytes) -> bytes:
    """Wrap a raw glTF JSON document in a GLB container with no BIN chunk."""
    document += b" " * (-len(document) % 4)
    chunk = struct.pack("<II", len(document), 0x4E4F534A) + document
    return struct.pack("<4sII", b"glTF", 2, 12 + len(chunk)) + chunk


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingHandler:
    """httpx.MockTransport handler that serves fixed responses by URL."""

    def __init__(self, routes: dict[str, httpx.Response]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(str(request.url))
        if response is None:
            return httpx.Response(404)
        return httpx.Response(
            response.status_code,
            content=response.content,
            headers=response.headers,
        )


@pytest.fixture
def large_glb():
    """A 50m x 30m x 20m building-sized box."""
    return make_box_glb([50.0, 30.0, 20.0])


@pytest.fixture
def small_glb():
    return make_box_glb([1.0, 1.5, 1.0])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryScalingCache(ttl_seconds=3600, sweep_threshold=50, clock=clock)


@pytest.fixture
def handler(large_glb, small_glb):
    return RecordingHandler(
        {
            SOURCE_URL: httpx.Response(200, content=large_glb),
            "https://zenodo.org/records/1/files/statue.glb": httpx.Response(
                200, content=small_glb
            ),
            "https://zenodo.org/records/2/files/broken.glb": httpx.Response(
                200, content=b"this is not a glb"
            ),
        }
    )
