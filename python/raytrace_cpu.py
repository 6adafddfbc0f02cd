"""
CPU Ray Tracer with spheres, disks and point lights.
Supports recursive mirror reflections up to the scene's max_depth.
"""
import math
from concurrent.futures import ProcessPoolExecutor
from typing import Tuple, Optional, List, Dict, Any

from vecmath import Vector3, add, sub, mul, neg, hadamard, dot, cross, length, norm, reflect, mix, as_vector
from shapes import Ray, Shape
from scene import Scene, MAX_DEPTH, load_scene, validate_scene, build_scene, default_scene_data
from framebuffer import Framebuffer

BLACK: Vector3 = (0.0, 0.0, 0.0)
DEFAULT_CHUNK_ROWS = 16


def find_nearest(scene: Scene, ray: Ray) -> Tuple[Optional[Shape], float]:
    """Closest shape along the ray; the first one scanned wins ties."""
    nearest_shape = None
    nearest_t = math.inf
    for shape in scene.shapes:
        t = shape.intersect(ray)
        if t is not None and t < nearest_t:
            nearest_shape = shape
            nearest_t = t
    return nearest_shape, nearest_t

def is_occluded(scene: Scene, shadow_ray: Ray, max_distance: float) -> bool:
    """True if any shape sits on the shadow ray strictly between its origin and max_distance."""
    for shape in scene.shapes:
        t = shape.occludes(shadow_ray)
        if t is not None and 0.0 < t < max_distance:
            return True
    return False

def light_attenuation(distance: float, cutoff: float) -> float:
    """Smooth falloff: 1 at the light, exactly 0 from the cutoff radius outward."""
    x = distance / cutoff
    falloff = max(0.0, 1.0 - x * x)
    return falloff * falloff

def trace_ray(scene: Scene, ray: Ray, depth: int = 0) -> Vector3:
    """
    Recursive Whitted-style ray tracing.

    Args:
        scene: Scene to trace through (read-only)
        ray: Ray to follow
        depth: Number of reflections already followed; recursion stops at scene.max_depth

    Returns:
        Unclamped linear RGB colour
    """
    shape, t = find_nearest(scene, ray)
    if shape is None:
        return scene.background

    hit = ray.get_point(t)
    n = shape.get_normal(hit)
    # Offset to avoid self-intersection
    biased_origin = add(hit, mul(n, scene.bias))
    color = BLACK

    # Reflection, boosted at grazing angles
    facing_ratio = dot(neg(ray.direction), n)
    fresnel = mix(pow(1.0 - facing_ratio, 3), 1.0, 0.1)
    if shape.reflectivity > 0 and depth < scene.max_depth:
        reflected_ray = Ray(biased_origin, reflect(ray.direction, n))
        reflected_color = trace_ray(scene, reflected_ray, depth + 1)
        color = add(color, mul(reflected_color, fresnel))

    color = add(color, hadamard(scene.ambient, shape.surface_color))

    # Direct lighting from every unoccluded light
    for light in scene.lights:
        to_light = sub(light.position, hit)
        dist_to_light = length(to_light)
        if dist_to_light < 1e-8:
            continue
        ldir = mul(to_light, 1.0 / dist_to_light)

        shadow_ray = Ray(biased_origin, ldir)
        if is_occluded(scene, shadow_ray, length(sub(light.position, biased_origin))):
            continue

        diffuse = max(0.0, dot(ldir, n))
        specular = pow(max(0.0, dot(n, reflect(neg(ldir), n))), scene.specular_exponent)
        attenuation = light_attenuation(dist_to_light, scene.light_cutoff)
        lit = add(mul(shape.surface_color, diffuse), (specular, specular, specular))
        color = add(color, mul(lit, attenuation))

    return color


class Camera:
    """
    Pinhole camera mapping pixel coordinates to primary rays.

    The basis is right = normalize(direction x up) and up = right x direction, so
    u = +1 is the right-hand edge of the image and v = +1 the top edge; a camera
    looking down -z with +y up sees +x on the right, without mirroring.
    """

    def __init__(self, position: Vector3, direction: Vector3, up: Vector3,
                 fov_degrees: float, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if not 0.0 < fov_degrees < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {fov_degrees}")
        if length(direction) < 1e-8:
            raise ValueError("Camera direction must be non-zero")

        self.position = position
        self.fov_degrees = fov_degrees
        self.width = width
        self.height = height

        # Camera basis
        self.forward = norm(direction)
        right = cross(self.forward, up)
        if length(right) < 1e-8:
            raise ValueError("Camera up vector must not be parallel to its direction")
        self.right = norm(right)
        self.up = cross(self.right, self.forward)

        self.tan_half_vertical = math.tan(math.radians(fov_degrees * 0.5))
        self.tan_half_horizontal = self.tan_half_vertical * (width / height)

    def primary_ray(self, x: int, y: int) -> Ray:
        """Ray through the centre of pixel (x, y); y = 0 is the top row."""
        u = 2.0 * (x + 0.5) / self.width - 1.0
        v = 1.0 - 2.0 * (y + 0.5) / self.height
        offset = add(mul(self.right, u * self.tan_half_horizontal),
                     mul(self.up, v * self.tan_half_vertical))
        target = add(add(self.position, self.forward), offset)
        return Ray(self.position, sub(target, self.position))


def build_camera(scene_data: Dict[str, Any]) -> Camera:
    cam = scene_data["camera"]
    render_settings = scene_data["render"]
    return Camera(
        as_vector(cam["position"]),
        as_vector(cam["direction"]),
        as_vector(cam["up"]),
        float(cam["fov"]),
        int(render_settings["width"]),
        int(render_settings["height"]),
    )

def _render_chunk(scene: Scene, camera: Camera, y_start: int, y_end: int) -> Tuple[int, List[List[Vector3]]]:
    rows = []
    for y in range(y_start, y_end):
        rows.append([trace_ray(scene, camera.primary_ray(x, y), 0) for x in range(camera.width)])
    return y_start, rows

def render_framebuffer(scene: Scene, camera: Camera, workers: int = 1,
                       chunk_rows: int = DEFAULT_CHUNK_ROWS, verbose: bool = True) -> Framebuffer:
    """
    Trace every pixel of the camera's image.

    With workers > 1 the image is split into chunks of rows traced in separate
    processes; every chunk owns a disjoint slice of the framebuffer, so the
    result is identical to a serial render.
    """
    W, H = camera.width, camera.height
    framebuffer = Framebuffer(W, H)

    if workers <= 1:
        for y in range(H):
            if verbose and y % 50 == 0:
                print(f"Progress: {y}/{H} ({100*y//H}%)")
            _, rows = _render_chunk(scene, camera, y, y + 1)
            framebuffer.set_rows(y, rows)
        return framebuffer

    chunk_rows = max(1, int(chunk_rows))
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_render_chunk, scene, camera, y_start, min(H, y_start + chunk_rows))
            for y_start in range(0, H, chunk_rows)
        ]
        done_rows = 0
        for future in futures:
            y_start, rows = future.result()
            framebuffer.set_rows(y_start, rows)
            done_rows += len(rows)
            if verbose:
                print(f"Progress: {done_rows}/{H} ({100*done_rows//H}%)")
    return framebuffer

def render(scene_data: Dict[str, Any], output_path: str = "render.bmp") -> Framebuffer:
    """Main rendering function."""
    scene = build_scene(scene_data)
    camera = build_camera(scene_data)

    render_settings = scene_data["render"]
    workers = int(render_settings.get("workers", 1))
    tone_map = render_settings.get("tone_map", "clamp")
    gamma = render_settings.get("gamma")

    print(f"Rendering {camera.width}x{camera.height} image with {scene.max_depth} max depth, "
          f"{len(scene.shapes)} shapes, {len(scene.lights)} lights...")

    framebuffer = render_framebuffer(scene, camera, workers=workers)
    framebuffer.save(output_path, tone_map=tone_map, gamma=gamma)
    print(f"Saved {output_path}")
    return framebuffer

if __name__ == "__main__":
    import os
    from datetime import datetime

    # Try to find scene.json in parent directory or current directory
    if os.path.exists("../scene.json"):
        scene_data = load_scene("../scene.json")
    elif os.path.exists("scene.json"):
        scene_data = load_scene("scene.json")
    else:
        print("No scene.json found, using the built-in default scene")
        scene_data = default_scene_data()
    validate_scene(scene_data)

    # Create renders directory
    renders_dir = "../renders" if os.path.exists("../scene.json") else "renders"
    os.makedirs(renders_dir, exist_ok=True)

    # Generate descriptive filename
    render_settings = scene_data["render"]
    num_shapes = len(scene_data.get("shapes", []))
    num_lights = len(scene_data.get("lights", []))
    max_depth = render_settings.get("max_depth", MAX_DEPTH)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"render_{timestamp}_d{max_depth}_s{num_shapes}_l{num_lights}_{render_settings['width']}x{render_settings['height']}.bmp"
    output_path = os.path.join(renders_dir, filename)

    render(scene_data, output_path)
