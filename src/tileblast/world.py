import random

from esper import World
from .events.bus import EventBus


def create_world(
    event_bus: EventBus,
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> World:
    """Create the ECS world for one board session.

    A shared ``random.Random`` is attached as ``world.random`` so systems that
    are not handed an explicit generator draw from the same seeded source.
    """
    world = World()
    if rng is None:
        rng = random.Random(seed)
    setattr(world, "random", rng)
    return world
