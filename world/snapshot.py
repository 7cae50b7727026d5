"""
fishtank module: world/snapshot.py

Immutable per-tick view of the simulation (foods + animals), the collaborator
protocol that produces it, and entity sanity checks.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Any, List, Mapping, Optional, Protocol, Tuple

from render.colors import parse_color


@dataclass(frozen=True)
class Food:
    x: float
    y: float
    color: str


@dataclass(frozen=True)
class Organism:
    x: float
    y: float
    rotation: float


@dataclass(frozen=True)
class WorldSnapshot:
    foods: Tuple[Food, ...] = ()
    animals: Tuple[Organism, ...] = ()
    # items that could not be read at all, one reason each
    dropped: Tuple[str, ...] = ()


class Simulation(Protocol):
    """What the viewer needs from a simulation engine."""

    def step(self) -> Any: ...

    def world(self) -> Any: ...


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item[name]
    return getattr(item, name)


def snapshot_from(raw: Any) -> WorldSnapshot:
    """
    Coerce whatever the collaborator returned into a WorldSnapshot.

    Accepts a WorldSnapshot, a mapping with "foods"/"animals", or any object
    with foods/animals attributes; items may be mappings or objects. An item
    missing a field is left out and noted in ``dropped``; the rest still draw.
    """
    if isinstance(raw, WorldSnapshot):
        return raw

    foods: List[Food] = []
    animals: List[Organism] = []
    dropped: List[str] = []

    for i, item in enumerate(_field(raw, "foods")):
        if isinstance(item, Food):
            foods.append(item)
            continue
        try:
            foods.append(Food(x=_field(item, "x"), y=_field(item, "y"), color=_field(item, "color")))
        except (KeyError, AttributeError, TypeError) as exc:
            dropped.append(f"food #{i}: unreadable ({exc!r})")

    for i, item in enumerate(_field(raw, "animals")):
        if isinstance(item, Organism):
            animals.append(item)
            continue
        try:
            animals.append(Organism(x=_field(item, "x"), y=_field(item, "y"), rotation=_field(item, "rotation")))
        except (KeyError, AttributeError, TypeError) as exc:
            dropped.append(f"animal #{i}: unreadable ({exc!r})")

    return WorldSnapshot(foods=tuple(foods), animals=tuple(animals), dropped=tuple(dropped))


def _position_problem(x: Any, y: Any) -> Optional[str]:
    try:
        fx = float(x)
        fy = float(y)
    except (TypeError, ValueError, OverflowError):
        return f"non-numeric position ({x!r}, {y!r})"
    if not (math.isfinite(fx) and math.isfinite(fy)):
        return f"non-finite position ({fx}, {fy})"
    if not (0.0 <= fx <= 1.0 and 0.0 <= fy <= 1.0):
        return f"position ({fx}, {fy}) outside [0, 1]"
    return None


def food_problem(food: Food) -> Optional[str]:
    """Reason this food should not be drawn, or None."""
    problem = _position_problem(food.x, food.y)
    if problem:
        return problem
    try:
        parse_color(food.color)
    except ValueError as exc:
        return str(exc)
    return None


def organism_problem(animal: Organism) -> Optional[str]:
    """Reason this organism should not be drawn, or None."""
    problem = _position_problem(animal.x, animal.y)
    if problem:
        return problem
    try:
        rotation = float(animal.rotation)
    except (TypeError, ValueError, OverflowError):
        return f"non-numeric rotation {animal.rotation!r}"
    if not math.isfinite(rotation):
        return f"non-finite rotation {rotation}"
    return None
