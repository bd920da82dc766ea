"""
JWT signer: issues a short-lived signed token for every request from a claim
template whose values may reference request data.
"""

from jwt_signer.errors import (
    ConfigurationError,
    JwtSignerError,
    PreconditionError,
    SigningError,
)
from jwt_signer.expander import expand_claims
from jwt_signer.issuer import issue_token
from jwt_signer.replacer import Replacer, SubstitutionContext
from jwt_signer.signer import JwtSigner
from jwt_signer.template import ClaimTemplate, build_template

__all__ = [
    "ClaimTemplate",
    "ConfigurationError",
    "JwtSigner",
    "JwtSignerError",
    "PreconditionError",
    "Replacer",
    "SigningError",
    "SubstitutionContext",
    "build_template",
    "expand_claims",
    "issue_token",
]
