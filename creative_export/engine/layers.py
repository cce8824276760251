"""Layer transform engine: derive a concrete layout for one target size."""

import logging
from dataclasses import replace

from ..models.layer import Layer, LayerModification, Layout

logger = logging.getLogger(__name__)


def apply_modifications(
    base_layout: Layout,
    modifications: list[LayerModification],
    target_size: str,
    warnings: list[str] | None = None,
) -> Layout:
    """Apply modifications in order and return a new layout.

    Modifications whose `sizes` exclude `target_size` are ignored. Position
    deltas add to the layer's current position and scale factors multiply
    its current scale, so repeated modifications to one layer compose.
    Unknown layer names are skipped with a warning (appended to `warnings`
    when given). The base layout is never mutated.
    """
    layers: list[Layer] = list(base_layout.layers)
    index = {layer.name.lower(): i for i, layer in enumerate(layers)}

    for mod in modifications:
        if not mod.applies_to(target_size):
            continue

        i = index.get(mod.layer_name.lower())
        if i is None:
            message = f"Layer '{mod.layer_name}' not found in {target_size} layout, skipping"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
            continue

        layers[i] = _apply_one(layers[i], mod)

    return replace(base_layout, size=target_size, layers=tuple(layers))


def _apply_one(layer: Layer, mod: LayerModification) -> Layer:
    x, y, scale = layer.x, layer.y, layer.scale

    if mod.position_delta:
        if mod.position_delta.x is not None:
            x += mod.position_delta.x
        if mod.position_delta.y is not None:
            y += mod.position_delta.y

    if mod.scale_factor is not None:
        scale *= mod.scale_factor

    return replace(layer, x=x, y=y, scale=scale)
