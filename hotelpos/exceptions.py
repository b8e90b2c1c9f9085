class ServiceError(Exception):
    """Base class for failures surfaced to callers of the service layer."""

    code = "INTERNAL"
    status = 500
    default_message = "Something went wrong."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ServiceError):
    code = "NOT_FOUND"
    status = 404
    default_message = "The requested record does not exist."


class Conflict(ServiceError):
    code = "CONFLICT"
    status = 409
    default_message = "The record conflicts with an existing one."


class Unprocessable(ServiceError):
    code = "UNPROCESSABLE"
    status = 422
    default_message = "The request could not be applied to the current state."


class InternalError(ServiceError):
    pass
