from kudoskit.utils.error.base_custom_error import BaseCustomError


class RecognitionDomainError(BaseCustomError):
    """Base class for all effort-to-recognition errors."""

    pass


class NormalizationError(RecognitionDomainError):
    """Raised when a webhook payload does not have the shape its source requires."""

    def __init__(self, source: str, reason: str, **metadata):
        super().__init__(f"Cannot normalize '{source}' payload: {reason}", source=source, reason=reason, **metadata)


class UnsupportedSourceError(NormalizationError):
    """Raised for source tags with no normalization rule."""

    def __init__(self, source: str):
        super().__init__(source, "unsupported source")


class RecognitionGenerationError(RecognitionDomainError):
    """Raised when no recognition record can be produced for an effort."""

    def __init__(self, effort_id: str | None, error: Exception):
        super().__init__(
            f"Failed to generate recognition for effort '{effort_id}'",
            effort_id=effort_id,
            original_error=error,
        )


class EffortNotFoundError(RecognitionDomainError):
    def __init__(self, effort_id: str):
        super().__init__(f"Effort not found: {effort_id}", effort_id=effort_id)


class StoreError(RecognitionDomainError):
    """Raised by store implementations when a record cannot be read or written."""

    pass
