"""Unsigned certificate template built from CSR and issuance policy.
"""

import ipaddress
from datetime import datetime, timezone
from typing import List, Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm

from .compat import ExtensionErrors, SubjectPublicKeyTypes, valid_subject_public_key
from .exceptions import IdentifierError, MalformedInput
from .objects import XKU_CODE_TO_OID, make_key_usage, split_san
from .policy import EXTENDED_KEY_USAGE, KEY_USAGE, VALIDITY_YEARS, add_years

__all__ = ("CertTemplate", "build_template", "csr_public_key")

IPAddressTypes = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class CertTemplate:
    """Certificate fields before signing.
    """
    subject: x509.Name
    public_key: SubjectPublicKeyTypes
    serial_number: int
    not_valid_before: datetime
    not_valid_after: datetime

    # SubjectKeyIdentifier / AuthorityKeyIdentifier
    subject_key_id: bytes
    authority_key_id: Optional[bytes]

    # KeyUsage + ExtendedKeyUsage
    key_usage: List[str]
    ext_key_usage: List[x509.ObjectIdentifier]

    # BasicConstraints
    is_ca: bool

    # SubjectAlternativeName
    dns_names: List[str]
    email_addresses: List[str]
    ip_addresses: List[IPAddressTypes]

    def __init__(self,
                 subject: x509.Name,
                 public_key: SubjectPublicKeyTypes,
                 serial_number: int,
                 subject_key_id: bytes,
                 not_valid_before: datetime,
                 not_valid_after: datetime,
                 key_usage: List[str],
                 ext_key_usage: List[x509.ObjectIdentifier],
                 dns_names: Optional[List[str]] = None,
                 email_addresses: Optional[List[str]] = None,
                 ip_addresses: Optional[List[IPAddressTypes]] = None,
                 ) -> None:
        self.subject = subject
        self.public_key = public_key
        self.serial_number = serial_number
        self.subject_key_id = subject_key_id
        self.authority_key_id = None
        self.not_valid_before = not_valid_before
        self.not_valid_after = not_valid_after
        self.key_usage = key_usage
        self.ext_key_usage = ext_key_usage
        self.is_ca = False
        self.dns_names = dns_names or []
        self.email_addresses = email_addresses or []
        self.ip_addresses = ip_addresses or []

    def general_names(self) -> List[x509.GeneralName]:
        """SAN entries in DNS, email, IP order.
        """
        gnames: List[x509.GeneralName] = []
        gnames.extend(x509.DNSName(v) for v in self.dns_names)
        gnames.extend(x509.RFC822Name(v) for v in self.email_addresses)
        gnames.extend(x509.IPAddress(v) for v in self.ip_addresses)
        return gnames

    def to_builder(self, issuer_name: x509.Name) -> x509.CertificateBuilder:
        """Return CertificateBuilder with all fields and extensions set.
        """
        builder = (x509.CertificateBuilder()
                   .subject_name(self.subject)
                   .issuer_name(issuer_name)
                   .not_valid_before(self.not_valid_before)
                   .not_valid_after(self.not_valid_after)
                   .serial_number(self.serial_number)
                   .public_key(self.public_key))

        ext: x509.ExtensionType

        # BasicConstraints, critical
        ext = x509.BasicConstraints(ca=self.is_ca, path_length=None)
        builder = builder.add_extension(ext, critical=True)

        # KeyUsage, critical
        ext = make_key_usage(**{k: True for k in self.key_usage})
        builder = builder.add_extension(ext, critical=True)

        # ExtendedKeyUsage
        if self.ext_key_usage:
            ext = x509.ExtendedKeyUsage(self.ext_key_usage)
            builder = builder.add_extension(ext, critical=False)

        # SubjectAlternativeName, critical if subject is empty
        gnames = self.general_names()
        if gnames:
            ext = x509.SubjectAlternativeName(gnames)
            builder = builder.add_extension(ext, critical=not list(self.subject))

        # SubjectKeyIdentifier
        ext = x509.SubjectKeyIdentifier(self.subject_key_id)
        builder = builder.add_extension(ext, critical=False)

        # AuthorityKeyIdentifier
        if self.authority_key_id is not None:
            ext = x509.AuthorityKeyIdentifier(key_identifier=self.authority_key_id,
                                              authority_cert_issuer=None,
                                              authority_cert_serial_number=None)
            builder = builder.add_extension(ext, critical=False)

        return builder


def csr_public_key(csr: x509.CertificateSigningRequest) -> SubjectPublicKeyTypes:
    """Public key from request, must be usable in certificate.
    """
    try:
        return valid_subject_public_key(csr.public_key())
    except (TypeError, ValueError, UnsupportedAlgorithm) as ex:
        raise IdentifierError("unsupported public key in request: %s" % ex) from ex


def csr_alt_names(csr: x509.CertificateSigningRequest) -> Optional[x509.SubjectAlternativeName]:
    """Requested SubjectAlternativeName extension, if any.
    """
    try:
        return csr.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return None
    except ExtensionErrors as ex:
        raise MalformedInput("invalid extensions in request: %s" % ex) from ex


def build_template(csr: x509.CertificateSigningRequest,
                   ski: bytes,
                   serial: int,
                   now: Optional[datetime] = None,
                   ) -> CertTemplate:
    """Fill template from request fields and fixed policy.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    # certificate times have second precision
    not_valid_before = now.replace(microsecond=0)
    not_valid_after = add_years(not_valid_before, VALIDITY_YEARS)

    san = split_san(csr_alt_names(csr))
    return CertTemplate(
        subject=csr.subject,
        public_key=csr_public_key(csr),
        serial_number=serial,
        subject_key_id=ski,
        not_valid_before=not_valid_before,
        not_valid_after=not_valid_after,
        key_usage=list(KEY_USAGE),
        ext_key_usage=[XKU_CODE_TO_OID[x] for x in EXTENDED_KEY_USAGE],
        dns_names=san["dns_names"],
        email_addresses=san["email_addresses"],
        ip_addresses=san["ip_addresses"],
    )
