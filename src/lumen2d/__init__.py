"""2D light transport renderer.

This package renders 2D scenes by tracing light paths through closed-form
primitives, with support for:
- Diffuse surfaces lit by shadow-tested direct lighting
- Mirrors, refraction with total internal reflection
- Absorbing media following the Beer-Lambert law
- Tile-parallel Monte Carlo sampling with deterministic per-tile seeds

Subpackages:
    core: Vectors, rays, the tracer, sampling, pixel buffer and scheduling
    geometry: Shape primitives and intersection algorithms
    materials: Surface and medium models
    scene: Immutable scene container, scene queries and example presets
    preview: Tone mapping and PNG export utilities
"""

__version__ = "0.1.0"
