"""Public API
"""

# pylint: disable=unused-import

from . import FULL_VERSION
from .backend import CryptoBackend, DefaultBackend
from .certinfo import describe_certificate
from .compat import (
    IssuerPrivateKeyTypes, IssuerPublicKeyTypes, SubjectPublicKeyTypes,
    get_utc_datetime, valid_issuer_private_key, valid_subject_public_key,
)
from .exceptions import IdentifierError, IssuanceError, MalformedInput, SigningError
from .formats import render_name, render_serial, to_hex
from .issue import describe_pem, issue_certificate, parse_certificate, sign_certificate
from .keys import get_key_name, new_serial_number, same_pubkey, subject_key_id
from .pemfile import (
    certificate_to_pem,
    load_certificate, load_csr, load_private_key,
)
from .policy import EXTENDED_KEY_USAGE, KEY_USAGE, VALIDITY_YEARS
from .result import ErrorKind, Failure, Result, Success
from .signer import sign_template
from .template import CertTemplate, build_template, csr_public_key

__all__ = (
    "FULL_VERSION",
    "VALIDITY_YEARS", "KEY_USAGE", "EXTENDED_KEY_USAGE",
    "IssuerPrivateKeyTypes", "IssuerPublicKeyTypes", "SubjectPublicKeyTypes",
    "CryptoBackend", "DefaultBackend",
    "CertTemplate", "build_template", "csr_public_key", "sign_template",
    "ErrorKind", "Success", "Failure", "Result",
    "IssuanceError", "MalformedInput", "IdentifierError", "SigningError",
    "issue_certificate", "describe_pem", "sign_certificate", "parse_certificate",
    "describe_certificate",
    "new_serial_number", "subject_key_id", "get_key_name", "same_pubkey",
    "certificate_to_pem",
    "load_csr", "load_private_key", "load_certificate",
    "render_name", "render_serial", "to_hex",
    "get_utc_datetime", "valid_issuer_private_key", "valid_subject_public_key",
)
