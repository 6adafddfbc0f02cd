"""
Interactive 3D preview of the scene using Plotly.
Helps verify geometry before rendering.
"""
import math
import plotly.graph_objects as go
from scene import load_scene, validate_scene
from vecmath import add, mul, cross, norm, length, clamp01


def _rgb(color) -> str:
    r, g, b = (int(clamp01(c) * 255) for c in color)
    return f'rgb({r}, {g}, {b})'

def sphere_surface(center, radius, steps: int = 16):
    """Latitude/longitude grid for a sphere as nested x, y, z lists."""
    xs, ys, zs = [], [], []
    for i in range(steps + 1):
        theta = math.pi * i / steps
        row_x, row_y, row_z = [], [], []
        for j in range(steps + 1):
            phi = 2.0 * math.pi * j / steps
            row_x.append(center[0] + radius * math.sin(theta) * math.cos(phi))
            row_y.append(center[1] + radius * math.cos(theta))
            row_z.append(center[2] + radius * math.sin(theta) * math.sin(phi))
        xs.append(row_x)
        ys.append(row_y)
        zs.append(row_z)
    return xs, ys, zs

def disk_fan(center, radius, normal, segments: int = 32):
    """Triangle fan for a disk: vertex lists plus i, j, k index lists."""
    n = norm(normal)
    # Any vector not parallel to the normal gives an in-plane basis
    helper = (1.0, 0.0, 0.0) if abs(n[0]) < 0.9 else (0.0, 0.0, 1.0)
    u = norm(cross(n, helper))
    v = cross(n, u)

    points = [tuple(center)]
    for s in range(segments):
        angle = 2.0 * math.pi * s / segments
        rim = add(mul(u, radius * math.cos(angle)), mul(v, radius * math.sin(angle)))
        points.append(add(tuple(center), rim))

    i_idx = [0] * segments
    j_idx = [1 + s for s in range(segments)]
    k_idx = [1 + (s + 1) % segments for s in range(segments)]
    return points, i_idx, j_idx, k_idx

def create_scene_preview(scene_data: dict):
    """Create interactive 3D plot of scene."""
    fig = go.Figure()

    # Shapes
    for i, shape in enumerate(scene_data.get("shapes", [])):
        pos = shape["position"]
        radius = shape["radius"]
        color = _rgb(shape.get("color", [1.0, 1.0, 1.0]))

        if shape["type"] == "sphere":
            xs, ys, zs = sphere_surface(pos, radius)
            fig.add_trace(go.Surface(
                x=xs, y=ys, z=zs,
                colorscale=[[0, color], [1, color]],
                showscale=False,
                opacity=0.9,
                name=f'Sphere {i+1}'
            ))
        else:
            points, i_idx, j_idx, k_idx = disk_fan(pos, radius, shape["normal"])
            fig.add_trace(go.Mesh3d(
                x=[p[0] for p in points],
                y=[p[1] for p in points],
                z=[p[2] for p in points],
                i=i_idx, j=j_idx, k=k_idx,
                color=color,
                opacity=0.5,
                name=f'Disk {i+1}'
            ))

    # Lights
    for i, light in enumerate(scene_data.get("lights", [])):
        light_pos = light["position"]
        fig.add_trace(go.Scatter3d(
            x=[light_pos[0]],
            y=[light_pos[1]],
            z=[light_pos[2]],
            mode='markers',
            marker=dict(size=15, color='yellow', symbol='circle'),
            name=f'Light {i+1}'
        ))

    # Camera
    cam = scene_data["camera"]
    cam_pos = cam["position"]
    direction = cam["direction"]
    # Draw the look direction ten units long regardless of input scale
    look_len = 10.0 / max(length(tuple(direction)), 1e-8)
    look_at = [cam_pos[k] + direction[k] * look_len for k in range(3)]

    fig.add_trace(go.Scatter3d(
        x=[cam_pos[0]],
        y=[cam_pos[1]],
        z=[cam_pos[2]],
        mode='markers',
        marker=dict(size=10, color='red', symbol='diamond'),
        name='Camera'
    ))

    # Camera look direction
    fig.add_trace(go.Scatter3d(
        x=[cam_pos[0], look_at[0]],
        y=[cam_pos[1], look_at[1]],
        z=[cam_pos[2], look_at[2]],
        mode='lines',
        line=dict(color='red', width=3, dash='dash'),
        name='Camera Look'
    ))

    fig.update_layout(
        title="Scene Preview (Interactive 3D)",
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode='data'
        ),
        width=1000,
        height=800
    )

    return fig

if __name__ == "__main__":
    scene_data = load_scene("../scene.json")
    validate_scene(scene_data)
    fig = create_scene_preview(scene_data)
    fig.show()
