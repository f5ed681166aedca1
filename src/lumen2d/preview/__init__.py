"""Preview module for turning radiance buffers into viewable images.

Components:
    display: Tone mapping (Reinhard, luminance, exposure) and gamma
    export: PNG encoding through Pillow, RMSE comparison

Nothing here feeds back into rendering; these are consumers of finalized
buffers.
"""

from .display import (
    ToneMapMethod,
    apply_gamma,
    auto_exposure,
    process_image_for_display,
    tone_map_exposure,
    tone_map_luminance,
    tone_map_reinhard,
)
from .export import (
    compute_rmse,
    image_to_uint8,
    load_png,
    radiance_image,
    save_png,
    save_png_from_array,
)

__all__ = [
    # Display
    "ToneMapMethod",
    "tone_map_reinhard",
    "tone_map_luminance",
    "tone_map_exposure",
    "auto_exposure",
    "apply_gamma",
    "process_image_for_display",
    # Export
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "radiance_image",
    "load_png",
    "compute_rmse",
]
