from typing import Optional

from pydantic import ValidationError


class InvalidTrainsetError(ValueError):
    """A trainset record failed validation; the whole optimization run is aborted."""

    def __init__(self, message: str, *, index: Optional[int] = None, trainset_id: Optional[str] = None,
                 validation_error: Optional[ValidationError] = None):
        super().__init__(message)
        self.index = index
        self.trainset_id = trainset_id
        self.validation_error = validation_error

    def errors(self) -> list:
        if self.validation_error is None:
            return []
        return self.validation_error.errors(include_url=False, include_context=False, include_input=False)


class RandomSourceError(ValueError):
    """Injected random source produced a value outside [0, 1)."""
