"""A custom value type that opts into `+` and `-` through capabilities.

    entitytrace tree examples/vector_demo.py
"""

from dataclasses import dataclass
from typing import Self

from entitytrace import Addable, Entity, Subtractable


@dataclass(frozen=True)
class Vector2D(Addable, Subtractable):
    x: float
    y: float

    def add(self, left: Self, right: Self) -> Self:
        return type(self)(left.x + right.x, left.y + right.y)

    def subtract(self, left: Self, right: Self) -> Self:
        return type(self)(left.x - right.x, left.y - right.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


position = Entity("Position", Vector2D(0.0, 0.0))
velocity = Entity("Velocity", Vector2D(1.5, -0.5))
wind = Entity("Wind", Vector2D(0.25, 0.0))

next_position = position + velocity - wind


if __name__ == "__main__":
    print(f"{next_position.dependency_expression} = {next_position.resolve()}")
    next_position.print_graph()
