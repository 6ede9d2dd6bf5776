from dataclasses import dataclass

@dataclass(slots=True, eq=False)
class Tile:
    """A coloured tile occupying one grid cell.

    tile_id is stable for the tile's lifetime so the presentation layer can
    track it across drops and shuffles. x/y always equal the cell holding it;
    only GridState updates them.
    """
    tile_id: int
    color_id: int
    x: int
    y: int
