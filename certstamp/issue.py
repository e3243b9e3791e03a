"""Issue and describe certificates from PEM input.

The raising functions (issue_certificate, describe_pem) are for library
use.  The boundary functions (sign_certificate, parse_certificate) never
raise for bad input or failed signing, they return Success or Failure.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from cryptography import x509

from .backend import CryptoBackend
from .certinfo import describe_certificate
from .exceptions import IssuanceError, MalformedInput
from .formats import render_serial
from .keys import new_serial_number, subject_key_id
from .pemfile import certificate_to_pem, load_certificate, load_csr, load_private_key
from .result import Failure, Result, Success
from .signer import sign_template
from .template import build_template, csr_public_key

__all__ = ("issue_certificate", "describe_pem", "sign_certificate", "parse_certificate")

log = logging.getLogger(__name__)

PemInput = Union[str, bytes]


def issue_certificate(csr_pem: PemInput,
                      key_pem: PemInput,
                      issuer_pem: Optional[PemInput] = None,
                      self_sign: bool = False,
                      backend: Optional[CryptoBackend] = None,
                      ) -> x509.Certificate:
    """Sign CSR with issuer key.

    issuer_pem is ignored when self_sign is set.
    """
    csr = load_csr(csr_pem)
    privkey = load_private_key(key_pem)

    serial = new_serial_number()
    ski = subject_key_id(csr_public_key(csr), backend)
    template = build_template(csr, ski, serial)

    parent = None
    if not self_sign:
        if not issuer_pem:
            raise MalformedInput("issuer certificate required unless self-signing")
        parent = load_certificate(issuer_pem)

    cert = sign_template(template, privkey, parent=parent, self_sign=self_sign, backend=backend)
    log.info("issued %s certificate serial=%s subject=%s",
             "self-signed" if self_sign else "chained",
             render_serial(cert.serial_number), cert.subject.rfc4514_string())
    return cert


def describe_pem(cert_pem: PemInput) -> Dict[str, Any]:
    """Load certificate and describe it.
    """
    return describe_certificate(load_certificate(cert_pem))


def _failure(op: str, ex: IssuanceError) -> Failure:
    log.warning("%s failed [%s]: %s", op, ex.kind.value, ex)
    return Failure(ex.kind, str(ex), ex)


def sign_certificate(csr_pem: PemInput,
                     key_pem: PemInput,
                     issuer_pem: Optional[PemInput],
                     self_sign: bool,
                     backend: Optional[CryptoBackend] = None,
                     ) -> Result[str]:
    """Issue certificate, return PEM text or typed failure.
    """
    try:
        cert = issue_certificate(csr_pem, key_pem, issuer_pem, self_sign, backend)
    except IssuanceError as ex:
        return _failure("sign", ex)
    return Success(certificate_to_pem(cert))


def parse_certificate(cert_pem: PemInput) -> Result[str]:
    """Describe certificate as JSON text or return typed failure.
    """
    try:
        info = describe_pem(cert_pem)
    except IssuanceError as ex:
        return _failure("parse", ex)
    return Success(json.dumps(info, sort_keys=True))
