"""Command-line renderer.

Renders one of the preset scenes progressively and writes the result as a
PPM or PNG file, logging progress after every batch.

Usage:
    pathtracer-render [options]

Example:
    pathtracer-render --width 400 --samples 10 --max-depth 5 --output final.ppm
    pathtracer-render --scene three-spheres --samples 50 --output preview.png --preview
"""

import argparse
import logging
import time
from pathlib import Path

from pathtracer.config import DEFAULT_ASPECT_RATIO, RenderSettings
from pathtracer.runtime import ARCHITECTURES, init_runtime

logger = logging.getLogger(__name__)

SCENE_CHOICES = ("final", "three-spheres")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pathtracer-render",
        description="Render a preset scene with the Monte Carlo path tracer.",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=DEFAULT_ASPECT_RATIO,
        help="Width divided by height (default: 1.5)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=10,
        help="Number of samples per pixel (default: 10)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=5,
        help="Maximum number of bounces per path (default: 5)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=1,
        help="Samples per progress update (default: 1)",
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_CHOICES,
        default="final",
        help="Scene to render (default: final)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for scene generation and sampling (default: 0)",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHITECTURES),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="CPU worker threads (default: all hardware threads)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file; .ppm writes plain PPM, other suffixes use Pillow "
        "(default: image.ppm)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--no-jitter",
        action="store_true",
        help="Sample pixel centers only",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def render_scene(
    settings: RenderSettings,
    scene: str = "final",
    seed: int = 0,
    output_path: str = "image.ppm",
    preview: bool = False,
) -> Path:
    """Render a preset scene and save it.

    The Taichi runtime must already be initialised.

    Args:
        settings: Image and sampling configuration.
        scene: One of SCENE_CHOICES.
        seed: Seed for the random scene layout.
        output_path: Output file path.
        preview: Show the result in a Matplotlib window after saving.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the scene name or a setting is invalid.
        RuntimeError: If the scene exceeds the arena capacity.
    """
    # Lazy imports: these modules declare Taichi fields
    from pathtracer.core.progressive import ProgressiveRenderer
    from pathtracer.output import save_image, show_preview
    from pathtracer.scene.presets import (
        final_scene,
        final_scene_camera,
        three_spheres_camera,
        three_spheres_scene,
    )

    if scene == "final":
        world = final_scene(seed)
        camera = final_scene_camera(settings.aspect_ratio)
    elif scene == "three-spheres":
        world = three_spheres_scene()
        camera = three_spheres_camera(settings.aspect_ratio)
    else:
        raise ValueError(f"Unknown scene '{scene}'. Expected one of: {', '.join(SCENE_CHOICES)}")

    width, height = settings.image_width, settings.image_height
    logger.info("Scene '%s': %r", scene, world)

    renderer = ProgressiveRenderer(
        world, camera, width, height, settings.max_depth, jitter=settings.jitter
    )

    logger.info(
        "Rendering %dx%d, %d spp, max depth %d",
        width,
        height,
        settings.samples_per_pixel,
        settings.max_depth,
    )
    start_time = time.perf_counter()

    for current, target in renderer.render_progressive(
        settings.samples_per_pixel, settings.batch_size
    ):
        elapsed = time.perf_counter() - start_time
        samples_per_sec = current / elapsed if elapsed > 0 else 0.0
        logger.info(
            "Progress: %d/%d samples (%.1f%%) - %.1f spp/s",
            current,
            target,
            100.0 * current / target,
            samples_per_sec,
        )

    image = renderer.get_image_numpy()
    output_file = Path(output_path)
    save_image(output_file, image)
    logger.info("Done in %.2fs", time.perf_counter() - start_time)

    if preview:
        show_preview(image, title=f"{scene} - {renderer.sample_count} SPP")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    args = parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    try:
        settings = RenderSettings(
            image_width=args.width,
            aspect_ratio=args.aspect_ratio,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            batch_size=args.batch_size,
            jitter=not args.no_jitter,
        )
        init_runtime(arch=args.arch, random_seed=args.seed, max_threads=args.threads)
        render_scene(
            settings,
            scene=args.scene,
            seed=args.seed,
            output_path=args.output,
            preview=args.preview,
        )
    except (ValueError, RuntimeError) as e:
        logger.error("Render failed: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
