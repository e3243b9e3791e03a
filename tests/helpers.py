
import base64
import ipaddress
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence, Tuple

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.serialization import (
    Encoding, NoEncryption, PrivateFormat,
)
from cryptography.x509.oid import NameOID, ObjectIdentifier

from certstamp import api as certstamp


def new_key(ktype: str = "ec") -> Any:
    if ktype == "ec":
        return ec.generate_private_key(ec.SECP256R1())
    if ktype == "ec384":
        return ec.generate_private_key(ec.SECP384R1())
    if ktype == "rsa":
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)
    if ktype == "ed25519":
        return ed25519.Ed25519PrivateKey.generate()
    raise ValueError(ktype)


def sign_algo(key: Any) -> Optional[SHA256]:
    if isinstance(key, ed25519.Ed25519PrivateKey):
        return None
    return SHA256()


def key_pem(key: Any) -> str:
    return key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()).decode()


def cn_name(cn: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, cn)])


def new_csr(key: Any, cn: Optional[str] = "test.example.com",
            san: Sequence[x509.GeneralName] = ()) -> x509.CertificateSigningRequest:
    builder = x509.CertificateSigningRequestBuilder()
    builder = builder.subject_name(cn_name(cn) if cn else x509.Name([]))
    if san:
        builder = builder.add_extension(x509.SubjectAlternativeName(list(san)), critical=False)
    return builder.sign(key, sign_algo(key))


def csr_pem(csr: x509.CertificateSigningRequest) -> str:
    return csr.public_bytes(Encoding.PEM).decode()


def new_ca(cn: str = "Test CA", ktype: str = "ec", with_ski: bool = True) -> Tuple[Any, x509.Certificate]:
    key = new_key(ktype)
    now = datetime.now(timezone.utc)
    builder = (x509.CertificateBuilder()
               .subject_name(cn_name(cn))
               .issuer_name(cn_name(cn))
               .public_key(key.public_key())
               .serial_number(x509.random_serial_number())
               .not_valid_before(now - timedelta(hours=1))
               .not_valid_after(now + timedelta(days=365))
               .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True))
    if with_ski:
        builder = builder.add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
    return key, builder.sign(key, sign_algo(key))


def cert_pem(cert: x509.Certificate) -> str:
    return cert.public_bytes(Encoding.PEM).decode()


def sample_san() -> List[x509.GeneralName]:
    return [
        x509.DNSName("test.example.com"),
        x509.DNSName("www.example.com"),
        x509.RFC822Name("admin@example.com"),
        x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
        x509.IPAddress(ipaddress.ip_address("::1")),
        x509.UniformResourceIdentifier("https://example.com/"),
    ]


def issue(self_sign: bool = True, ktype: str = "ec", **kwargs: Any) -> Tuple[x509.Certificate, Any]:
    """Issue certificate through the public api, return (cert, subject key).
    """
    key = new_key(ktype)
    csr = new_csr(key, **kwargs)
    if self_sign:
        cert = certstamp.issue_certificate(csr_pem(csr), key_pem(key), None, self_sign=True)
    else:
        ca_key, ca_cert = new_ca()
        cert = certstamp.issue_certificate(csr_pem(csr), key_pem(ca_key), cert_pem(ca_cert))
    return cert, key


def pem_block(der: bytes, label: str) -> str:
    b64 = base64.encodebytes(der).decode("ascii")
    return "-----BEGIN %s-----\n%s-----END %s-----\n" % (label, b64, label)


# extension OID 2.5.29.99 is unknown, rewriting its last arc duplicates a standard one
_spare_oid = ObjectIdentifier("2.5.29.99")
_spare_oid_der = b"\x06\x03\x55\x1d\x63"


def _rename_spare_ext(der: bytes, arc: int) -> bytes:
    assert der.count(_spare_oid_der) == 1
    return der.replace(_spare_oid_der, _spare_oid_der[:-1] + bytes([arc]))


def dup_ski_ca() -> Tuple[Any, x509.Certificate]:
    """CA certificate carrying SubjectKeyIdentifier twice.
    """
    key = new_key()
    now = datetime.now(timezone.utc)
    ski = x509.SubjectKeyIdentifier.from_public_key(key.public_key())
    spare = x509.UnrecognizedExtension(_spare_oid, b"\x04\x14" + ski.digest)
    cert = (x509.CertificateBuilder()
            .subject_name(cn_name("Test CA"))
            .issuer_name(cn_name("Test CA"))
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - timedelta(hours=1))
            .not_valid_after(now + timedelta(days=365))
            .add_extension(ski, critical=False)
            .add_extension(spare, critical=False)
            .sign(key, sign_algo(key)))
    der = _rename_spare_ext(cert.public_bytes(Encoding.DER), 0x0e)
    return key, x509.load_der_x509_certificate(der)


def dup_san_csr(key: Any) -> x509.CertificateSigningRequest:
    """Request carrying SubjectAlternativeName twice.
    """
    name = b"b.example.com"
    spare = x509.UnrecognizedExtension(_spare_oid, b"\x30" + bytes([len(name) + 2]) +
                                       b"\x82" + bytes([len(name)]) + name)
    csr = (x509.CertificateSigningRequestBuilder()
           .subject_name(cn_name("test.example.com"))
           .add_extension(x509.SubjectAlternativeName([x509.DNSName("a.example.com")]), critical=False)
           .add_extension(spare, critical=False)
           .sign(key, sign_algo(key)))
    der = _rename_spare_ext(csr.public_bytes(Encoding.DER), 0x11)
    return x509.load_der_x509_csr(der)
