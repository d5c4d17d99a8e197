"""Error taxonomy shared by the photo and contact pipelines."""

from portfolio_site.domain.contact import FieldError


class PortfolioError(Exception):
    """Base class for application errors."""


class DecodeError(PortfolioError):
    """Raised when input bytes cannot be interpreted as an image."""


class StoreError(PortfolioError):
    """Raised when the local blob store cannot read or write."""


class ContactValidationError(PortfolioError):
    """Raised when one or more contact fields are malformed."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(error.field for error in errors)
        super().__init__(f"Invalid contact fields: {fields}")


class RateLimited(PortfolioError):
    """Raised when a caller exceeds the submission rate."""

    def __init__(self, identity: str, retry_after: float) -> None:
        self.identity = identity
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded for {identity}")


class SendError(PortfolioError):
    """Raised when the outbound mail transport fails."""


class CorsRejected(PortfolioError):
    """Raised when a request origin is not on the allow-list."""

    def __init__(self, origin: str) -> None:
        self.origin = origin
        super().__init__(f"Origin not allowed: {origin}")
