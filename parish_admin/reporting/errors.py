from __future__ import annotations


class ExportError(RuntimeError):
    """Report export failed. The message is user-facing ("Export failed: ...")."""


class DeliveryError(RuntimeError):
    """The rendered report could not be handed to the user."""


class PopupBlockedError(DeliveryError):
    def __init__(self, message: str = "Please allow popups to print the report") -> None:
        super().__init__(message)


__all__ = ["ExportError", "DeliveryError", "PopupBlockedError"]
