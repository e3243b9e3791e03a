"""Sign certificate templates, self-signed or under an issuer certificate.
"""

import logging
from typing import Any, Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm

from .backend import CryptoBackend, DefaultBackend
from .compat import ExtensionErrors, IssuerPrivateKeyTypes, valid_issuer_private_key
from .exceptions import MalformedInput, SigningError
from .formats import render_serial
from .keys import get_key_name, same_pubkey
from .template import CertTemplate

__all__ = ("sign_template", "issuer_key_id")

log = logging.getLogger(__name__)


def issuer_key_id(parent: x509.Certificate) -> Optional[bytes]:
    """SubjectKeyIdentifier of issuer certificate, if present.
    """
    try:
        ext = parent.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)
    except x509.ExtensionNotFound:
        return None
    except ExtensionErrors as ex:
        raise MalformedInput("invalid issuer certificate extensions: %s" % ex) from ex
    return ext.value.digest


def _issuer_key(privkey: Any) -> IssuerPrivateKeyTypes:
    try:
        return valid_issuer_private_key(privkey)
    except TypeError as ex:
        raise SigningError("%s: %s" % (ex, get_key_name(privkey))) from ex


def sign_template(template: CertTemplate,
                  issuer_privkey: Any,
                  parent: Optional[x509.Certificate] = None,
                  self_sign: bool = False,
                  backend: Optional[CryptoBackend] = None,
                  ) -> x509.Certificate:
    """Create signed certificate from template.

    With self_sign the template is its own parent: issuer name is the
    template subject, AuthorityKeyIdentifier equals SubjectKeyIdentifier
    and the certificate is marked as CA.  Otherwise parent must be the
    issuer certificate, its subject becomes issuer name and its
    SubjectKeyIdentifier is used as AuthorityKeyIdentifier.
    """
    if backend is None:
        backend = DefaultBackend()
    issuer_key = _issuer_key(issuer_privkey)
    issuer_pubkey = issuer_key.public_key()

    if self_sign:
        template.authority_key_id = template.subject_key_id
        template.is_ca = True
        issuer_name = template.subject
        if not same_pubkey(issuer_pubkey, template.public_key):
            raise SigningError("Private key does not match request public key")
    else:
        if parent is None:
            raise SigningError("Issuer certificate required unless self-signing")
        issuer_name = parent.subject
        try:
            parent_pubkey = parent.public_key()
        except (ValueError, UnsupportedAlgorithm) as ex:
            raise SigningError("Unsupported issuer certificate key: %s" % ex) from ex
        if not same_pubkey(issuer_pubkey, parent_pubkey):
            raise SigningError("Issuer private key does not match certificate")
        if template.authority_key_id is None:
            template.authority_key_id = issuer_key_id(parent)

    log.debug("signing serial %s with %s key", render_serial(template.serial_number),
              get_key_name(issuer_key))
    try:
        builder = template.to_builder(issuer_name)
        cert = backend.sign(builder, issuer_key)
    except (TypeError, ValueError, UnsupportedAlgorithm) as ex:
        raise SigningError("Signing failed: %s" % ex) from ex

    try:
        backend.verify(cert, cert if self_sign else parent)
    except (InvalidSignature, ValueError, TypeError, UnsupportedAlgorithm) as ex:
        raise SigningError("Signature over certificate is invalid") from ex
    return cert
