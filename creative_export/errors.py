"""Error taxonomy for the export engine."""


class CreativeExportError(Exception):
    """Base exception for creative export errors."""

    pass


class ValidationError(CreativeExportError):
    """A manifest, palette or session failed its invariants."""

    def __init__(self, violations: list[str] | str):
        if isinstance(violations, str):
            violations = [violations]
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))


class NotFoundError(CreativeExportError):
    """Unknown layer, template, size or handshake token."""

    pass


class InvalidTransitionError(CreativeExportError):
    """Translation state machine violation."""

    def __init__(self, language_code: str, current: str, target: str):
        self.language_code = language_code
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid transition for '{language_code}': {current} -> {target}"
        )


class UpstreamError(CreativeExportError):
    """A collaborator (translation backend, Shopify, storage) failed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")
