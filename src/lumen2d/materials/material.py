"""Material variant set and medium helpers.

Materials form a closed set of variants. The tracer dispatches on them with
``match``; MaterialType mirrors the set for code that needs a plain tag, for
example when reporting scene contents.
"""

from __future__ import annotations

from enum import IntEnum

from lumen2d.core.spectrum import Spectrum, zero_spectrum

from .absorbing import Absorbing
from .diffuse import Diffuse
from .emissive import Emissive
from .refractive import Refractive
from .specular import Specular

Material = Diffuse | Specular | Refractive | Absorbing | Emissive


class MaterialType(IntEnum):
    """Enumeration of supported material types."""

    DIFFUSE = 0
    SPECULAR = 1
    REFRACTIVE = 2
    ABSORBING = 3
    EMISSIVE = 4


def material_type(material: Material) -> MaterialType:
    """Get the tag for a material variant.

    Raises:
        TypeError: If the value is not one of the material variants.
    """
    match material:
        case Diffuse():
            return MaterialType.DIFFUSE
        case Specular():
            return MaterialType.SPECULAR
        case Refractive():
            return MaterialType.REFRACTIVE
        case Absorbing():
            return MaterialType.ABSORBING
        case Emissive():
            return MaterialType.EMISSIVE
    raise TypeError(f"Unknown material: {material!r}")


def is_medium(material: Material) -> bool:
    """Check whether the material turns its primitive into a medium boundary."""
    return isinstance(material, (Refractive, Absorbing))


def medium_extinction(material: Material) -> Spectrum:
    """Get the interior extinction coefficients of a medium material.

    Non-media have no interior and therefore zero extinction.
    """
    match material:
        case Refractive():
            return material.sigma
        case Absorbing():
            return material.sigma
    return zero_spectrum()
