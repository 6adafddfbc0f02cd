"""
Rays, surface primitives (spheres and disks) and point lights.
Each shape answers two questions: where does a ray first meet it,
and what is the surface normal at a point on it.
"""
import math
from typing import Optional

from vecmath import Vector3, add, sub, mul, dot, length, norm

# Rays closer to parallel than this never hit a disk
PARALLEL_EPSILON = 1e-6


def _require_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


class Ray:
    """A half-line with an origin and a unit-length direction."""

    def __init__(self, origin: Vector3, direction: Vector3):
        l = length(direction)
        if not math.isfinite(l) or l < 1e-8:
            raise ValueError(f"Ray direction must be non-zero, got {direction}")
        self.origin = origin
        self.direction = mul(direction, 1.0 / l)

    def get_point(self, t: float) -> Vector3:
        """Point at distance t along the ray."""
        return add(self.origin, mul(self.direction, t))

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"


class Shape:
    """Base class for a surface with a position and material properties."""

    kind = "shape"

    def __init__(self, position: Vector3, color: Vector3 = (1.0, 1.0, 1.0),
                 opacity: float = 1.0, reflectivity: float = 0.0):
        _require_finite("reflectivity", reflectivity)
        if not 0.0 <= reflectivity <= 1.0:
            raise ValueError(f"reflectivity must be in [0, 1], got {reflectivity}")
        self.position = position
        self.surface_color = color
        self.opacity = opacity
        self.reflectivity = reflectivity

    def intersect(self, ray: Ray) -> Optional[float]:
        """Distance along the ray to the surface, or None on a miss."""
        raise NotImplementedError

    def occludes(self, ray: Ray) -> Optional[float]:
        """Distance at which the surface blocks a shadow ray; same as intersect unless overridden."""
        return self.intersect(ray)

    def get_normal(self, point: Vector3) -> Vector3:
        raise NotImplementedError


class Sphere(Shape):
    kind = "sphere"

    def __init__(self, position: Vector3, radius: float, color: Vector3 = (1.0, 1.0, 1.0),
                 opacity: float = 1.0, reflectivity: float = 0.0):
        super().__init__(position, color, opacity, reflectivity)
        _require_finite("radius", radius)
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.radius = radius
        self.radius_squared = radius * radius

    def intersect(self, ray: Ray) -> Optional[float]:
        """
        Geometric ray-sphere test reporting only the near root.

        Spheres whose centre lies behind the ray origin are rejected outright,
        even when the origin is inside the sphere. A ray starting inside and
        facing the centre yields a negative distance.
        """
        l = sub(self.position, ray.origin)
        proj = dot(l, ray.direction)
        if proj < 0:
            return None
        perp_squared = dot(l, l) - proj * proj
        if perp_squared > self.radius_squared:
            return None
        half_chord = math.sqrt(self.radius_squared - perp_squared)
        return proj - half_chord

    def get_normal(self, point: Vector3) -> Vector3:
        return norm(sub(point, self.position))

    def __repr__(self) -> str:
        return f"Sphere(position={self.position}, radius={self.radius})"


class Disk(Shape):
    """Infinitely thin circular patch of a plane."""

    kind = "disk"

    def __init__(self, position: Vector3, radius: float, normal: Vector3 = (0.0, 1.0, 0.0),
                 color: Vector3 = (1.0, 1.0, 1.0), opacity: float = 1.0,
                 reflectivity: float = 0.0):
        super().__init__(position, color, opacity, reflectivity)
        _require_finite("radius", radius)
        if radius <= 0:
            raise ValueError(f"Disk radius must be positive, got {radius}")
        if length(normal) < 1e-8:
            raise ValueError(f"Disk normal must be non-zero, got {normal}")
        self.radius = radius
        self.radius_squared = radius * radius
        self.normal = norm(normal)

    def _plane_hit(self, ray: Ray, denom: float) -> Optional[float]:
        distance = dot(self.normal, sub(self.position, ray.origin)) / denom
        if distance < 0:
            return None
        v = sub(ray.get_point(distance), self.position)
        if dot(v, v) > self.radius_squared:
            return None
        return distance

    def intersect(self, ray: Ray) -> Optional[float]:
        """Only the front face, the side the normal points to, is visible."""
        denom = dot(self.normal, ray.direction)
        if denom >= -PARALLEL_EPSILON:
            return None
        return self._plane_hit(ray, denom)

    def occludes(self, ray: Ray) -> Optional[float]:
        # Blocks light from either side
        denom = dot(self.normal, ray.direction)
        if abs(denom) <= PARALLEL_EPSILON:
            return None
        return self._plane_hit(ray, denom)

    def get_normal(self, point: Vector3) -> Vector3:
        return self.normal

    def __repr__(self) -> str:
        return f"Disk(position={self.position}, radius={self.radius}, normal={self.normal})"


class PointLight:
    """White point light; falloff is applied by the tracer."""

    def __init__(self, position: Vector3):
        self.position = position

    def __repr__(self) -> str:
        return f"PointLight(position={self.position})"
