"""Taichi runtime initialisation.

The pixel buffer resolves its sums with a Taichi kernel. Taichi must be
initialised exactly once per process before the first kernel launch; calling
ti.init() again resets the runtime and invalidates compiled kernels, so every
entry point goes through init_taichi(), which is idempotent.
"""

import logging
import threading

import taichi as ti

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_initialized = False


def init_taichi(arch=None, **kwargs) -> None:
    """Initialise Taichi if it has not been initialised yet.

    Args:
        arch: Taichi backend. Defaults to ti.cpu.
        **kwargs: Extra arguments forwarded to ti.init().
    """
    global _initialized
    with _lock:
        if _initialized:
            return
        ti.init(arch=arch if arch is not None else ti.cpu, default_fp=ti.f64, **kwargs)
        _initialized = True
        logger.info("Taichi runtime initialised")


def is_initialized() -> bool:
    return _initialized
