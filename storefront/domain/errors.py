# storefront/domain/errors.py


class StorefrontError(Exception):
    """Bazowy blad klienta - kazdy trafia do widoku jako komunikat (banner)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(StorefrontError):
    """Brak tokenu albo token wygasl (401) - widok przekierowuje na /login."""


class ValidationError(StorefrontError):
    """Walidacja po stronie klienta, zadne zapytanie nie zostalo wyslane."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class InvalidTransitionError(ValidationError):
    """Niedozwolona zmiana statusu zamowienia dla danej roli."""


class NetworkError(StorefrontError):
    """Polaczenie odrzucone, timeout albo odpowiedz spoza 2xx bez koperty JSON."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ServerLogicError(StorefrontError):
    """Serwer odpowiedzial {"success": false, "message": ...}."""

    def __init__(self, message: str, status_code: int | None = None, errors=None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors


class ConflictError(StorefrontError):
    """Poprzednia zmiana tego samego elementu (pozycji koszyka, zamowienia) wciaz trwa."""
