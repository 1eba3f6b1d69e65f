class FetchError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NetworkFailure(FetchError):
    """Timeout, DNS failure, connection reset."""


class CertificateFailure(FetchError):
    """TLS handshake or certificate problem. Retrying cannot fix it."""


class ClientErrorResponse(FetchError):
    pass


class ServerErrorResponse(FetchError):
    pass


class EmptyContentError(FetchError):
    """Body missing or below the usable length threshold."""


class AutomationFailure(Exception):
    def __init__(self, message: str, tier: str):
        self.message = message
        self.tier = tier
        super().__init__(f"{tier}: {message}")
