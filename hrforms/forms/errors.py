class FormError(Exception):
    """Base class for form controller errors."""


class FormStateError(FormError):
    """Operation is not available in the form's current state."""


class UnknownFieldError(FormError):
    def __init__(self, page: str, field: str) -> None:
        super().__init__(f"Field {field!r} is not editable on {page}")
        self.page = page
        self.field = field
