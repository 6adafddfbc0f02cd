"""Scene container plus loading and validation from scene.json"""
import json
import math
from typing import Dict, List, Any, Optional, Sequence

from vecmath import Vector3, as_vector
from shapes import Shape, Sphere, Disk, PointLight

BACKGROUND_COLOR: Vector3 = (0.1, 0.17, 0.3)
AMBIENT_COLOR: Vector3 = (0.2, 0.2, 0.2)
MAX_DEPTH = 6
BIAS = 0.01
SPECULAR_EXPONENT = 50.0
LIGHT_CUTOFF = 100.0


class Scene:
    """
    Shapes and lights to be rendered, plus the shading constants used by the tracer.

    Shapes keep the order they were given in; that order only matters for
    breaking ties between hits at exactly the same distance. The collections
    are stored as tuples and the scene is treated as read-only during a render.
    """

    def __init__(self, shapes: Sequence[Shape] = (), lights: Sequence[PointLight] = (),
                 background: Vector3 = BACKGROUND_COLOR,
                 ambient: Vector3 = AMBIENT_COLOR,
                 max_depth: int = MAX_DEPTH,
                 bias: float = BIAS,
                 specular_exponent: float = SPECULAR_EXPONENT,
                 light_cutoff: float = LIGHT_CUTOFF):
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        if light_cutoff <= 0:
            raise ValueError(f"light_cutoff must be positive, got {light_cutoff}")
        if not math.isfinite(bias) or bias < 0:
            raise ValueError(f"bias must be finite and non-negative, got {bias}")
        if not math.isfinite(specular_exponent) or specular_exponent < 0:
            raise ValueError(f"specular_exponent must be finite and non-negative, got {specular_exponent}")
        self.shapes = tuple(shapes)
        self.lights = tuple(lights)
        self.background = background
        self.ambient = ambient
        self.max_depth = max_depth
        self.bias = bias
        self.specular_exponent = specular_exponent
        self.light_cutoff = light_cutoff

    def __repr__(self) -> str:
        return f"Scene({len(self.shapes)} shapes, {len(self.lights)} lights)"


def load_scene(json_path: str = "scene.json") -> Dict[str, Any]:
    """Load scene configuration from JSON file."""
    with open(json_path, 'r') as f:
        return json.load(f)

def validate_scene(scene: Dict[str, Any]) -> None:
    """Basic validation of scene structure."""
    assert "camera" in scene, "Scene must have camera"
    assert "render" in scene, "Scene must have render settings"
    assert "shapes" in scene, "Scene must have shapes"

    # Validate camera
    cam = scene["camera"]
    assert "position" in cam and len(cam["position"]) == 3, "Camera needs a 3D position"
    assert "direction" in cam and len(cam["direction"]) == 3, "Camera needs a 3D direction"
    assert "up" in cam and len(cam["up"]) == 3, "Camera needs a 3D up vector"
    assert "fov" in cam, "Camera needs a field of view"

    # Validate render settings
    render = scene["render"]
    assert "width" in render and "height" in render, "Render settings need width and height"

    # Validate shapes
    for i, shape in enumerate(scene["shapes"]):
        assert shape.get("type") in ("sphere", "disk"), f"Shape {i} has unknown type {shape.get('type')!r}"
        assert "position" in shape and len(shape["position"]) == 3, f"Shape {i} needs a 3D position"
        assert "radius" in shape, f"Shape {i} needs a radius"
        if shape["type"] == "disk":
            assert "normal" in shape and len(shape["normal"]) == 3, f"Disk {i} needs a 3D normal"

    # Validate lights
    for i, light in enumerate(scene.get("lights", [])):
        assert "position" in light and len(light["position"]) == 3, f"Light {i} needs a 3D position"

    print("Scene validation passed!")

def build_shape(shape_data: Dict[str, Any]) -> Shape:
    """Construct a Sphere or Disk from its JSON description."""
    kind = shape_data.get("type")
    common = dict(
        color=as_vector(shape_data.get("color", [1.0, 1.0, 1.0])),
        opacity=float(shape_data.get("opacity", 1.0)),
        reflectivity=float(shape_data.get("reflectivity", 0.0)),
    )
    position = as_vector(shape_data["position"])
    radius = float(shape_data["radius"])
    if kind == "sphere":
        return Sphere(position, radius, **common)
    if kind == "disk":
        return Disk(position, radius, normal=as_vector(shape_data["normal"]), **common)
    raise ValueError(f"Unknown shape type {kind!r}")

def build_scene(scene_data: Dict[str, Any]) -> Scene:
    """Turn a scene dictionary into a Scene ready for tracing."""
    shading = scene_data.get("shading", {})
    render = scene_data.get("render", {})
    shapes: List[Shape] = [build_shape(s) for s in scene_data.get("shapes", [])]
    lights = [PointLight(as_vector(l["position"])) for l in scene_data.get("lights", [])]
    return Scene(
        shapes,
        lights,
        background=as_vector(shading.get("background", BACKGROUND_COLOR)),
        ambient=as_vector(shading.get("ambient", AMBIENT_COLOR)),
        max_depth=int(render.get("max_depth", MAX_DEPTH)),
        bias=float(render.get("bias", BIAS)),
        specular_exponent=float(shading.get("specular_exponent", SPECULAR_EXPONENT)),
        light_cutoff=float(shading.get("light_cutoff", LIGHT_CUTOFF)),
    )

def default_scene_data(width: Optional[int] = None, height: Optional[int] = None) -> Dict[str, Any]:
    """
    The classic demo scene: five spheres over a reflective floor disk,
    lit by a single light up and to the right of the camera.
    """
    return {
        "camera": {
            "position": [0.0, 0.0, 0.0],
            "direction": [0.0, 0.0, -1.0],
            "up": [0.0, 1.0, 0.0],
            "fov": 65.0,
        },
        "render": {
            "width": width or 1280,
            "height": height or 720,
            "max_depth": MAX_DEPTH,
            "bias": BIAS,
            "workers": 1,
            "tone_map": "clamp",
        },
        "shading": {
            "background": list(BACKGROUND_COLOR),
            "ambient": list(AMBIENT_COLOR),
            "specular_exponent": SPECULAR_EXPONENT,
            "light_cutoff": LIGHT_CUTOFF,
        },
        "shapes": [
            {"type": "sphere", "position": [0.0, 0.0, -20.0], "radius": 4.0,
             "color": [1.00, 0.32, 0.36], "reflectivity": 0.7},
            {"type": "sphere", "position": [5.0, -1.0, -15.0], "radius": 2.0,
             "color": [0.90, 0.76, 0.46], "reflectivity": 1.0},
            {"type": "sphere", "position": [5.0, 0.0, -25.0], "radius": 3.0,
             "color": [0.35, 0.97, 0.37], "reflectivity": 0.5},
            {"type": "sphere", "position": [-5.5, 0.0, -15.0], "radius": 3.0,
             "color": [0.9, 0.9, 0.9], "reflectivity": 1.0},
            {"type": "sphere", "position": [0.0, 5.0, -15.0], "radius": 1.0,
             "color": [0.2, 0.32, 0.9], "reflectivity": 1.0},
            # Floor faces up, towards the camera
            {"type": "disk", "position": [0.0, -5.0, -30.0], "radius": 40.0,
             "normal": [0.0, 1.0, 0.0], "color": [0.2, 0.2, 0.2], "reflectivity": 0.5},
        ],
        "lights": [
            {"position": [20.0, 20.0, -5.0]},
        ],
    }
