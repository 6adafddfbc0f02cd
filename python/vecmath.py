"""Vector math utilities on plain (x, y, z) tuples."""
import math
from typing import Tuple

Vector3 = Tuple[float, float, float]


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])

def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])

def mul(a: Vector3, s: float) -> Vector3:
    return (a[0] * s, a[1] * s, a[2] * s)

def neg(a: Vector3) -> Vector3:
    return (-a[0], -a[1], -a[2])

def hadamard(a: Vector3, b: Vector3) -> Vector3:
    """Component-wise product, used for tinting colours."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])

def dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )

def length(v: Vector3) -> float:
    return math.sqrt(dot(v, v))

def norm(v: Vector3) -> Vector3:
    l = length(v)
    if l < 1e-8:
        return (0.0, 0.0, 0.0)
    return mul(v, 1.0 / l)

def reflect(rd: Vector3, n: Vector3) -> Vector3:
    """Reflect ray direction rd off surface with normal n."""
    return sub(rd, mul(n, 2.0 * dot(rd, n)))

def mix(a: float, b: float, t: float) -> float:
    """Linear blend between a and b."""
    return a * (1.0 - t) + b * t

def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))

def as_vector(values) -> Vector3:
    """Convert a JSON list (or any 3-sequence) into a float tuple."""
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))
