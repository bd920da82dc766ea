"""
Per-request token signing.

``JwtSigner`` holds the configuration shared by every request: the raw
duration and secret (both may contain placeholders) and the claim template.
It is immutable once validated, so one instance serves concurrent requests.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from jwt_signer.config import DEFAULT_PUBLISHED_NAME, Settings
from jwt_signer.directive import parse_directive
from jwt_signer.durations import parse_duration
from jwt_signer.errors import ConfigurationError, PreconditionError
from jwt_signer.expander import expand_claims
from jwt_signer.issuer import issue_token
from jwt_signer.replacer import SubstitutionContext
from jwt_signer.template import ClaimTemplate, NestedNode, load_claims_json

logger = logging.getLogger(__name__)


class JwtSigner:
    """Issue a signed token for each request and publish it to the replacer."""

    def __init__(
        self,
        duration: str,
        secret: str,
        claims: Optional[ClaimTemplate] = None,
        published_name: str = DEFAULT_PUBLISHED_NAME,
    ):
        self._duration = duration
        self._secret = secret
        self._claims = claims if claims is not None else NestedNode()
        self._published_name = published_name

        self.validate()

        logger.debug(
            "Provisioned",
            extra={"duration": self._duration, "claims": self._claims.to_raw()},
        )

    @property
    def duration(self) -> str:
        return self._duration

    @property
    def claims(self) -> ClaimTemplate:
        return self._claims

    @property
    def published_name(self) -> str:
        return self._published_name

    def validate(self) -> None:
        required = {"duration": self._duration, "secret": self._secret}
        for key, value in required.items():
            if not value:
                raise ConfigurationError(f"missing required parameter: {key}")
        if not self._published_name:
            raise ConfigurationError("missing required parameter: published_name")

    @classmethod
    def from_directive(
        cls, text: str, published_name: str = DEFAULT_PUBLISHED_NAME
    ) -> "JwtSigner":
        directive = parse_directive(text)
        return cls(
            directive.duration,
            directive.secret,
            directive.claims,
            published_name=published_name,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "JwtSigner":
        """Build the signer from settings, failing fast on bad configuration."""
        if settings.directive_file is not None:
            if settings.duration or settings.secret or settings.claims_json:
                raise ConfigurationError(
                    "directive_file cannot be combined with duration, secret or claims_json"
                )
            text = read_directive_file(settings.directive_file)
            return cls.from_directive(text, published_name=settings.published_name)

        return cls(
            settings.duration or "",
            settings.secret or "",
            load_claims_json(settings.claims_json or ""),
            published_name=settings.published_name,
        )

    def sign(self, ctx: SubstitutionContext, now: Optional[datetime] = None) -> str:
        """
        Issue a token for the current request and publish it into ``ctx``.

        Raises:
            PreconditionError: If duration or secret resolve to nothing, or
                the duration does not parse
            SigningError: If the token cannot be signed
        """
        dur_str = ctx.expand(self._duration)
        secret = ctx.expand(self._secret)

        to_validate = {"dur": dur_str, "secret": secret}
        for key, value in to_validate.items():
            if value == "":
                raise PreconditionError(
                    f"required parameter empty after replacements: {key}"
                )

        try:
            valid_for = parse_duration(dur_str)
        except ValueError as e:
            raise PreconditionError(f"invalid duration: {dur_str}") from e

        logger.debug(
            "Parsed duration",
            extra={"as_str": dur_str, "seconds": valid_for.total_seconds()},
        )

        claims = expand_claims(self._claims, ctx)
        token = issue_token(claims, valid_for, secret.encode("utf-8"), now=now)

        ctx.publish(self._published_name, token)
        return token


def read_directive_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(f"directive file not found: {path}") from e
    except OSError as e:
        raise ConfigurationError(f"failed reading directive file {path}: {e}") from e
