"""
Error kinds raised by the checkout, payment and provisioning services.
Each carries the HTTP status the JSON views answer with.
"""


class StoreError(Exception):
    """Base class for request-scoped failures"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_dict(self):
        return {'error': self.message}


class ValidationError(StoreError):
    """A required field is missing or structurally invalid"""
    status_code = 400


class NotFoundError(StoreError):
    """Referenced merchant, order or product does not exist"""
    status_code = 404


class ConflictError(StoreError):
    """Email, subdomain or slug already taken"""
    status_code = 409


class PriceMismatchError(StoreError):
    """Client line-item price disagrees with the catalog price"""
    status_code = 422


class TotalMismatchError(StoreError):
    """Client total disagrees with the server-computed total"""
    status_code = 422


class GatewayError(StoreError):
    """Payment gateway returned a failure; message passed through as-is"""
    status_code = 502
