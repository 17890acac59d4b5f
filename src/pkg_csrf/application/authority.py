from __future__ import annotations

import time
from typing import Any, Callable, Optional, TypeVar

import structlog

from ..config.settings import CsrfSettings
from ..domain.exceptions import InvalidIdentityError, TokenError
from ..domain.ports import Clock, IdentityResolver, RequestContext, WriteClassifier
from ..domain.value_objects import Identity, Rejection
from .use_cases.issue import IssueTokenUseCase
from .use_cases.verify import VerifyTokenUseCase

R = TypeVar("R")

logger = structlog.get_logger("pkg_csrf")


def _system_clock() -> int:
    return int(time.time())


def _log_failure(exc: Exception) -> None:
    logger.info("CSRF verification failed", reason=type(exc).__name__, error=str(exc))


class CsrfAuthority:
    """
    Stateless CSRF policy around the token codec.

    For every request:

      1. skip entirely if `should_protect` returns False
      2. classify: write requests must present a valid token
      3. issue a fresh token for the *next* request (unless anonymous)
      4. forward to the next handler, or return the fixed rejection

    The authority keeps no per-request state and can be shared by any
    number of concurrent requests.
    """

    def __init__(
            self,
            settings: CsrfSettings,
            identity_resolver: IdentityResolver,
            *,
            write_classifier: Optional[WriteClassifier] = None,
            should_protect: Optional[Callable[[Any], bool]] = None,
            clock: Optional[Clock] = None,
    ) -> None:
        self.settings = settings
        self._resolve_identity = identity_resolver
        self._write_classifier = write_classifier
        self._should_protect = should_protect
        self._clock = clock or _system_clock

        self._issue_uc = IssueTokenUseCase(
            secret=settings.secret,
            algorithm=settings.algorithm,
            ttl=settings.ttl,
        )
        self._verify_uc = VerifyTokenUseCase(
            secret=settings.secret,
            algorithm=settings.algorithm,
        )

        if settings.algorithm.is_legacy:
            logger.warning(
                "CSRF tokens are signed with a legacy digest, configure sha256",
                algorithm=settings.algorithm.value,
            )

    # ------------------------------------------------------------------ #
    # Policy
    # ------------------------------------------------------------------ #

    def should_protect(self, request: Any) -> bool:
        if self._should_protect is None:
            return True
        return bool(self._should_protect(request))

    def needs_verification(self, request: Any) -> bool:
        if self._write_classifier is not None:
            return bool(self._write_classifier(request))
        return request.method.upper() not in self.settings.safe_methods

    def identity_for(self, request: Any) -> Identity:
        return Identity.of(self._resolve_identity(request))

    # ------------------------------------------------------------------ #
    # Token operations
    # ------------------------------------------------------------------ #

    def issue_token(self, identity: Identity | Any) -> Optional[str]:
        """Sign a token for `identity`, or return None for anonymous callers."""
        return self._issue_uc.execute(Identity.of(identity), self._clock())

    def verify_token(self, token: Optional[str], identity: Identity | Any) -> bool:
        """
        True only if `token` is well-formed, signed for `identity` and not
        expired. The failure reason is logged, never returned.
        """
        try:
            self._verify_uc.execute(token, Identity.of(identity), self._clock())
        except (TokenError, InvalidIdentityError) as exc:
            _log_failure(exc)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Request operations
    # ------------------------------------------------------------------ #

    def presented_token(self, request: RequestContext) -> Optional[str]:
        token = request.get_body_field(self.settings.attribute)
        if not token:
            get_header = getattr(request, "get_header", None)
            if get_header is not None:
                token = get_header(self.settings.header_name)
        return token if isinstance(token, str) else None

    def verify(self, request: RequestContext) -> bool:
        try:
            identity = self.identity_for(request)
        except InvalidIdentityError as exc:
            _log_failure(exc)
            return False
        return self.verify_token(self.presented_token(request), identity)

    def issue(
            self,
            request: RequestContext,
            identity: Optional[Identity] = None,
    ) -> RequestContext:
        """
        Return `request` with a fresh token attached, or unchanged if the
        caller is anonymous.
        """
        if identity is None:
            identity = self.identity_for(request)
        token = self.issue_token(identity)
        if token is None:
            return request
        return request.with_attribute(self.settings.attribute, token)

    def reject(self) -> Rejection:
        return Rejection(
            status_code=self.settings.status_on_error,
            body=self.settings.error_body,
        )

    def prepare(self, request: RequestContext) -> RequestContext | Rejection:
        """
        Classify, verify and issue without calling the next handler.

        Returns the rejection, or the request to forward (with the token for
        the next cycle attached). Resolves the identity once.
        """
        if not self.should_protect(request):
            return request

        needs_verification = self.needs_verification(request)
        try:
            identity = self.identity_for(request)
        except InvalidIdentityError as exc:
            if not needs_verification:
                raise
            _log_failure(exc)
            return self.reject()

        if needs_verification:
            token = self.presented_token(request)
            if not self.verify_token(token, identity):
                return self.reject()

        return self.issue(request, identity)

    def process(
            self,
            request: RequestContext,
            handler: Callable[[RequestContext], R],
    ) -> R | Rejection:
        """
        Run the full classify / verify / issue / forward cycle.
        """
        prepared = self.prepare(request)
        if isinstance(prepared, Rejection):
            return prepared
        return handler(prepared)
