"""Materials module for surface and medium models.

This module implements the optical behaviors attached to primitives:

Components:
    diffuse: Matte surfaces lit by shadow-tested direct lighting
    specular: Mirrors with per-channel reflectivity
    refractive: Glass-like media (Snell's law, total internal reflection)
    absorbing: Non-refracting media (Beer-Lambert attenuation)
    emissive: Light sources
    material: Variant set, MaterialType tags and medium helpers

A primitive may combine "is a medium boundary" with an absorbing interior:
Refractive takes an ``absorption`` spectrum, and Absorbing is a medium that
does not bend rays. Extinction only ever applies to path length travelled
inside the medium.
"""

from .absorbing import Absorbing, transmittance
from .diffuse import Diffuse, diffuse_falloff
from .emissive import Emissive
from .material import Material, MaterialType, is_medium, material_type, medium_extinction
from .refractive import (
    Refractive,
    fresnel_reflectance,
    scatter_refractive,
    will_reflect,
)
from .specular import Specular, scatter_specular

__all__ = [
    "Material",
    "MaterialType",
    "material_type",
    "is_medium",
    "medium_extinction",
    # Diffuse
    "Diffuse",
    "diffuse_falloff",
    # Specular
    "Specular",
    "scatter_specular",
    # Refractive
    "Refractive",
    "scatter_refractive",
    "will_reflect",
    "fresnel_reflectance",
    # Absorbing
    "Absorbing",
    "transmittance",
    # Emissive
    "Emissive",
]
