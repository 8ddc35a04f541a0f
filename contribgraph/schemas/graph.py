from collections.abc import Callable

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class GraphNode(BaseModel):
    """Diagram node; `x` and `y` are set once the layout has settled."""

    id: str
    group: int
    x: float | None = None
    y: float | None = None


class GraphLink(BaseModel):
    """Directed edge between two node ids."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    value: int = Field(ge=0)


def default_link_distance(link: GraphLink) -> float:
    return 70 + 25 * link.value


class ForceParameters(BaseModel):
    """Knobs handed to the layout engine."""

    model_config = ConfigDict(frozen=True)

    center: tuple[float, float]
    link_distance: Callable[[GraphLink], float] = default_link_distance
    link_strength: float = 0.6
    charge_strength: float = -420.0
    collision_radius: float = 26.0
    iterations: int = Field(default=300, ge=1)
