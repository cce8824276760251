"""Layout and layer modification models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Layer:
    """A named visual element within a layout."""

    name: str
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    width: float = 0.0               # base size, before scale
    height: float = 0.0
    kind: str = "image"              # "image", "text", "shape" or "group"
    is_dynamic: bool = False

    @property
    def scaled_width(self) -> float:
        return self.width * self.scale

    @property
    def scaled_height(self) -> float:
        return self.height * self.scale


@dataclass(frozen=True)
class Layout:
    """Concrete layout for one ad size."""

    size: str                        # "300x250"
    layers: tuple[Layer, ...] = ()

    def find(self, layer_name: str) -> int | None:
        """Index of a layer by case-insensitive name, or None."""
        wanted = layer_name.lower()
        for i, layer in enumerate(self.layers):
            if layer.name.lower() == wanted:
                return i
        return None


@dataclass(frozen=True)
class PositionDelta:
    """Relative move (negative = up/left)."""

    x: float | None = None
    y: float | None = None


@dataclass(frozen=True)
class LayerModification:
    """A declarative change to one layer, optionally limited to some sizes."""

    layer_name: str
    position_delta: PositionDelta | None = None
    scale_factor: float | None = None
    sizes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.scale_factor is not None and self.scale_factor <= 0:
            raise ValueError(f"scale_factor must be positive, got {self.scale_factor}")

    def applies_to(self, size: str) -> bool:
        """Empty sizes (or the "all" marker) means every size."""
        return not self.sizes or size in self.sizes or "all" in self.sizes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LayerModification":
        delta = data.get("positionDelta")
        return cls(
            layer_name=data["layerName"],
            position_delta=PositionDelta(x=delta.get("x"), y=delta.get("y")) if delta else None,
            scale_factor=data.get("scaleFactor"),
            sizes=frozenset(data.get("sizes") or ()),
        )
