# panelkit/exceptions.py


class PanelkitError(Exception):
    """Base exception for the panelkit runtime."""


class MarkupError(PanelkitError):
    """
    Raised when markup is structurally unsound (unbalanced or mismatched tags,
    constructs the parser does not understand).

    :param message: Human readable description.
    :param position: Character offset in the source where the problem was found.
    """

    def __init__(self, message: str, position: int = -1):
        self.position = position
        if position >= 0:
            message = f"{message} (at offset {position})"
        super().__init__(message)


class WidgetCreationError(PanelkitError):
    """Raised when the host factory cannot produce a panel for a markup node."""

    def __init__(self, type_name: str, reason: str = ""):
        self.type_name = type_name
        self.reason = reason
        text = f"Could not create panel of type '{type_name}'"
        if reason:
            text = f"{text}: {reason}"
        super().__init__(text)


class ModulePayloadError(PanelkitError):
    """Raised when a remote module payload cannot be evaluated into a capability table."""

    def __init__(self, module_name: str, reason: str = ""):
        self.module_name = module_name
        super().__init__(f"Invalid payload for module '{module_name}': {reason}")
