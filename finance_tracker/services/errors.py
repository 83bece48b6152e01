from enum import Enum


class ErrorKind(str, Enum):
    STORAGE = "storage"
    IMPORT_VALIDATION = "import_validation"
    CATEGORY_IN_USE = "category_in_use"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class FinanceError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION


class StorageError(FinanceError):
    """A record could not be read from or written to the store."""

    kind = ErrorKind.STORAGE


class ValidationError(FinanceError, ValueError):
    kind = ErrorKind.VALIDATION


class ImportValidationError(FinanceError, ValueError):
    kind = ErrorKind.IMPORT_VALIDATION


class CategoryInUseError(FinanceError, ValueError):
    kind = ErrorKind.CATEGORY_IN_USE

    def __init__(self, category_id: str, count: int):
        self.category_id = category_id
        self.count = count
        super().__init__(
            "Cannot delete category that has transactions. "
            "Please reassign transactions first."
        )


class NotFoundError(FinanceError, ValueError):
    kind = ErrorKind.NOT_FOUND
