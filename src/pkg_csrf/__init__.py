"""
pkg_csrf

Stateless CSRF tokens bound to a caller identity, with a framework-agnostic
core that can be integrated with multiple frameworks (FastAPI, Strawberry, etc.).
"""

__version__ = "0.1.0"

from .domain.constants import DigestAlgorithm, CERTIFICATE_SEPARATOR
from .domain.entities import SimpleRequest
from .domain.exceptions import (
    CsrfError,
    ConfigurationError,
    InvalidIdentityError,
    TokenError,
    TokenParseError,
    SignatureMismatchError,
    TokenExpiredError,
)
from .domain.value_objects import Identity, Token, Rejection
from .domain.ports import RequestContext, IdentityResolver, WriteClassifier, NextHandler, Clock
from .domain.codec import (
    encode_certificate,
    sign,
    encode_token,
    decode_token,
    verify_signature,
)

from .application.use_cases.issue import IssueTokenUseCase
from .application.use_cases.verify import VerifyTokenUseCase
from .application.authority import CsrfAuthority

from .config import CsrfSettings, settings_from_env
from .integrations.common.authority_factory import (
    create_csrf_authority,
    method_classifier,
    exempt,
)

__all__ = [
    "__version__",
    # domain core
    "DigestAlgorithm",
    "CERTIFICATE_SEPARATOR",
    "SimpleRequest",
    "Identity",
    "Token",
    "Rejection",
    "RequestContext",
    "IdentityResolver",
    "WriteClassifier",
    "NextHandler",
    "Clock",
    # codec
    "encode_certificate",
    "sign",
    "encode_token",
    "decode_token",
    "verify_signature",
    # exceptions
    "CsrfError",
    "ConfigurationError",
    "InvalidIdentityError",
    "TokenError",
    "TokenParseError",
    "SignatureMismatchError",
    "TokenExpiredError",
    # use cases
    "IssueTokenUseCase",
    "VerifyTokenUseCase",
    "CsrfAuthority",
    # config
    "CsrfSettings",
    "settings_from_env",
    # factory
    "create_csrf_authority",
    "method_classifier",
    "exempt",
]
