"""Error taxonomy shared by the OCR adapter, the grouping core and the entry points."""

EMPTY_TEXT_MESSAGE = "Shopping List doesn't contain any text"


class ShoppingListError(Exception):
    pass


class PhotoDetectionFailure(ShoppingListError):
    """Raised by text detectors when the image bytes cannot be read."""


class EmptyTextFailure(ShoppingListError):
    """Raised when no usable word survives detection and grouping."""

    def __init__(self, message: str = EMPTY_TEXT_MESSAGE) -> None:
        super().__init__(message)
