class CsrfError(Exception):
    """Base class for all CSRF errors."""
    pass


class ConfigurationError(CsrfError):
    """Raised when the component is constructed with invalid settings."""
    pass


class InvalidIdentityError(CsrfError):
    """Raised when an identity component cannot be encoded into a certificate."""
    pass


class TokenError(CsrfError):
    """Raised when a presented token does not verify."""
    pass


class TokenParseError(TokenError):
    """Raised when a token is missing, empty or malformed."""
    pass


class SignatureMismatchError(TokenError):
    """Raised when the recomputed signature differs from the presented one."""
    pass


class TokenExpiredError(TokenError):
    """Raised when the token expiration is not in the future."""
    pass
