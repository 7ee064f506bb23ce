# backend/utils/errors.py
from fastapi import HTTPException, status


class InvalidReference(HTTPException):
    """A foreign key in the payload does not resolve to an existing row."""

    def __init__(self, field: str, value: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {field}: {value}")
        self.field = field
        self.value = value


class DependentsExist(HTTPException):
    """Delete blocked because other rows still reference the target."""

    def __init__(self, resource: str, counts: dict):
        self.counts = counts
        if len(counts) == 1:
            described = str(next(iter(counts.values())))
        else:
            described = ", ".join(f"{name}: {count}" for name, count in counts.items())
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete the {resource} as it is associated with existing {_names(counts)}. Count: {described}",
        )


class Duplicate(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class StaleReference(HTTPException):
    # A referenced row disappeared between the existence check and the write
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="A referenced record no longer exists.")


class NotFound(HTTPException):
    def __init__(self, resource: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"The {resource} with the given ID was not found.",
        )


class MailDeliveryError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error sending email.")


class StoreError(HTTPException):
    # Commit or flush rejected by the database; details stay in the log
    def __init__(self):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error.")


def _names(counts: dict) -> str:
    blocking = [name for name, count in counts.items() if count]
    return " or ".join(blocking)
