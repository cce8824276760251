"""Export session, request and artifact models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .layer import Layout, LayerModification
from .localization import LocalizedCopy, LocalizedProductCopy


@dataclass
class ExportRequest:
    """Inbound export request payload."""

    template_path: str
    sizes: list[str]
    dynamic_values: dict[str, Any]
    layer_modifications: list[LayerModification] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExportRequest":
        return cls(
            template_path=data.get("templatePath", ""),
            sizes=list(data.get("sizes") or []),
            dynamic_values=dict(data.get("dynamicValues") or {}),
            layer_modifications=[
                LayerModification.from_dict(m) for m in data.get("layerModifications") or []
            ],
        )


@dataclass
class ExportSession:
    """Export flow state for one creative.

    Once `exported_at` is set the session is terminal: edits return a new,
    unexported session instead of mutating this one.
    """

    template_path: str
    selected_sizes: list[str] = field(default_factory=list)
    dynamic_values: dict[str, Any] = field(default_factory=dict)
    layer_modifications: list[LayerModification] = field(default_factory=list)
    exported_at: datetime | None = None

    @classmethod
    def from_request(cls, request: ExportRequest) -> "ExportSession":
        session = cls(template_path=request.template_path)
        session = session.select_sizes(request.sizes)
        session.dynamic_values = dict(request.dynamic_values)
        session.layer_modifications = list(request.layer_modifications)
        return session

    @property
    def is_exported(self) -> bool:
        return self.exported_at is not None

    def _editable(self) -> "ExportSession":
        if not self.is_exported:
            return self
        return replace(
            self,
            selected_sizes=list(self.selected_sizes),
            dynamic_values=dict(self.dynamic_values),
            layer_modifications=list(self.layer_modifications),
            exported_at=None,
        )

    def select_sizes(self, sizes: list[str]) -> "ExportSession":
        """Set the selected sizes, dropping duplicates but keeping order."""
        session = self._editable()
        session.selected_sizes = list(dict.fromkeys(sizes))
        return session

    def update_dynamic_values(self, **values: Any) -> "ExportSession":
        session = self._editable()
        session.dynamic_values = {**session.dynamic_values, **values}
        return session

    def add_modification(self, modification: LayerModification) -> "ExportSession":
        session = self._editable()
        session.layer_modifications = [*session.layer_modifications, modification]
        return session

    def mark_exported(self, when: datetime) -> None:
        self.exported_at = when


@dataclass(frozen=True)
class Artifact:
    """One fully-resolved ad bundle for a size/language pair."""

    size: str
    language: str
    layout: Layout
    copy: LocalizedCopy
    dynamic_values: dict[str, Any]
    fonts: dict[str, str]
    font_css: str
    colors: tuple[str, ...] = ()
    color_css: str = ""
    product_copies: tuple[LocalizedProductCopy, ...] = ()

    @property
    def name(self) -> str:
        return f"{self.language}/{self.size}"


@dataclass(frozen=True)
class AdSize:
    """An ad size available in a template."""

    id: str                          # "300x250"
    name: str                        # "Medium Rectangle"
    dimensions: str                  # "300 × 250"
