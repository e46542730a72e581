from dataclasses import dataclass

UP = "UP"
DOWN = "DOWN"
DIRECTIONS = (UP, DOWN)


@dataclass(frozen=True)
class Call:
    """
    A hall call: request for service at a floor, tagged with travel direction.

    Two calls are the same call when floor and direction match.
    """
    floor: int
    direction: str

    def __post_init__(self):
        if isinstance(self.floor, bool) or not isinstance(self.floor, int):
            raise ValueError(f"floor must be an integer, got {self.floor!r}")
        if self.floor < 1:
            raise ValueError(f"floor must be >= 1, got {self.floor}")
        if self.direction not in DIRECTIONS:
            raise ValueError(f"direction must be 'UP' or 'DOWN', got {self.direction!r}")

    def to_dict(self) -> dict:
        return {'floor': self.floor, 'direction': self.direction}
