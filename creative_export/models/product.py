"""Product model."""

from dataclasses import dataclass, field

from .localization import LocalizedProductCopy


@dataclass
class Product:
    """A commerce product whose copy can be localized."""

    id: str
    title: str
    vendor: str = ""
    handle: str = ""
    price: float = 0.0
    currency: str = "USD"
    image_urls: list[str] = field(default_factory=list)

    def to_copy(self, cta_text: str = "Shop Now") -> LocalizedProductCopy:
        """Source-language product copy handed to the localizer."""
        return LocalizedProductCopy(
            product_id=self.id,
            title=self.title,
            vendor=self.vendor,
            cta_text=cta_text,
        )
