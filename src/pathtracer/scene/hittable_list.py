"""Host-side scene container.

A ``HittableList`` is the ordered collection of spheres making up a scene.
It owns its spheres, and through them their materials, for the whole render.
Insertion order never affects the image: every member is tested and the
closest hit wins.

The list is plain Python. ``pathtracer.scene.intersection.load_scene`` uploads
it to the device arena before rendering.

Example:
    >>> from pathtracer.geometry import Sphere
    >>> from pathtracer.materials import Lambertian, Metal
    >>> world = HittableList()
    >>> ground = Lambertian((0.8, 0.8, 0.0))
    >>> world.add(Sphere((0.0, -100.5, -1.0), 100.0, ground))
    >>> world.add(Sphere((1.0, 0.0, -1.0), 0.5, Metal((0.8, 0.6, 0.2), fuzz=1.0)))
    >>> len(world)
    2
"""

from collections.abc import Iterator

from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.types import Material


class HittableList:
    """An ordered collection of spheres.

    Attributes:
        objects: The spheres in insertion order.
    """

    def __init__(self, objects: list[Sphere] | None = None) -> None:
        """Initialize the list, optionally with an initial set of spheres."""
        self.objects: list[Sphere] = list(objects) if objects is not None else []

    def add(self, sphere: Sphere) -> None:
        """Append a sphere to the scene."""
        self.objects.append(sphere)

    def clear(self) -> None:
        """Remove every sphere."""
        self.objects.clear()

    def materials(self) -> list[Material]:
        """Distinct materials in order of first use.

        Materials are compared by identity, so one instance shared by many
        spheres appears once while two equal but separate instances appear
        twice.
        """
        seen: set[int] = set()
        result: list[Material] = []
        for sphere in self.objects:
            key = id(sphere.material)
            if key not in seen:
                seen.add(key)
                result.append(sphere.material)
        return result

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"HittableList(spheres={len(self.objects)}, materials={len(self.materials())})"
