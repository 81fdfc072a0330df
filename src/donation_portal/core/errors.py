"""
Error kinds raised by the donation flow.

Every failure a request can hit is one of the kinds below. The API layer
maps each kind to a single HTTP response shape, so new kinds must be added
to ``ErrorKind`` and to the handlers in ``api.main`` together.
"""
from enum import Enum


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    TRANSACTION_FAILED = "transaction_failed"
    GATEWAY = "gateway"


class PortalError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(PortalError):
    """Client input is malformed, refers to an unknown plan, or the gateway rejected it."""
    kind = ErrorKind.BAD_REQUEST


class TransactionFailedError(PortalError):
    """A verified transaction finished in a status other than ``success``."""
    kind = ErrorKind.TRANSACTION_FAILED

    def __init__(self, status: str, gateway_response: str):
        super().__init__("Transaction was not successful")
        self.status = status
        self.gateway_response = gateway_response


class GatewayError(PortalError):
    """
    A call to the payment gateway failed.

    ``status_code`` is set when the gateway answered with a non-2xx status and
    is None for transport, JSON or response-shape failures.
    """
    kind = ErrorKind.GATEWAY

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
