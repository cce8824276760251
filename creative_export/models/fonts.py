"""Font resource model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FontResource:
    """An embedded font: family name plus base64 payload."""

    family: str
    payload: str
    mime_type: str = "font/woff2"

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"
