"""Taichi runtime initialisation.

Every kernel in this package works in double precision, so the runtime is
always initialised with ``default_fp=ti.f64``. Random numbers drawn with
``ti.random`` come from per-thread generator state derived from
``random_seed``; no generator is shared between parallel workers.

Modules that declare Taichi fields (the integrator, camera, scene arena and
material registry) must be imported after :func:`init_runtime` has run.

Example:
    >>> from pathtracer.runtime import init_runtime
    >>> init_runtime(arch="cpu", random_seed=7)
    >>> from pathtracer.core.integrator import render  # safe now
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

ARCHITECTURES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
}


def init_runtime(
    arch: str = "cpu",
    random_seed: int = 0,
    max_threads: int | None = None,
    debug: bool = False,
) -> None:
    """Initialise Taichi for rendering.

    Args:
        arch: Backend name, one of ``ARCHITECTURES``.
        random_seed: Seed for the per-thread random generators.
        max_threads: Size of the CPU worker pool. ``None`` uses every
            available hardware thread.
        debug: Enable Taichi's debug mode (bounds checks, slower).

    Raises:
        ValueError: If ``arch`` is unknown or ``max_threads`` is not positive.
    """
    if arch not in ARCHITECTURES:
        raise ValueError(
            f"Unknown architecture '{arch}'. Expected one of: {', '.join(ARCHITECTURES)}"
        )

    kwargs = {
        "arch": ARCHITECTURES[arch],
        "default_fp": ti.f64,
        "random_seed": random_seed,
        "debug": debug,
    }
    if max_threads is not None:
        if max_threads < 1:
            raise ValueError(f"max_threads must be positive, got {max_threads}")
        kwargs["cpu_max_num_threads"] = max_threads

    ti.init(**kwargs)
    logger.info(
        "Taichi initialised (arch=%s, seed=%d, threads=%s)",
        arch,
        random_seed,
        max_threads if max_threads is not None else "auto",
    )
