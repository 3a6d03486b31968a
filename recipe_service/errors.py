class RecipeServiceError(Exception):
    """Base class for failures the web layer turns into JSON responses."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RecipeServiceError):
    """A required field is missing, empty, or has the wrong shape."""

    status_code = 400


class NotFoundError(RecipeServiceError):
    status_code = 404


__all__ = ["NotFoundError", "RecipeServiceError", "ValidationError"]
