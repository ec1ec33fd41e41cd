# app/domain/errors.py


class CartError(Exception):
    """Bazowy blad domeny koszyka, niesie kod HTTP dla warstwy API."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CartError):
    status_code = 404


class InvalidRequestError(CartError):
    status_code = 400


class ConflictError(CartError):
    status_code = 409


class InternalError(CartError):
    status_code = 500


class UnauthorizedError(CartError):
    status_code = 401
