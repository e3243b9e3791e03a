"""Key type groups and compatibility between cryptography versions.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Tuple, Type, TypeAlias, Union, cast

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import (
    dh, dsa, ec, ed448, ed25519, rsa, x448, x25519,
)

__all__ = (
    "AllPrivateKeyTypes", "AllPublicKeyTypes",
    "IssuerPrivateKeyTypes", "IssuerPublicKeyTypes",
    "IssuerPrivateKeyClasses", "IssuerPublicKeyClasses",
    "SubjectPublicKeyTypes", "SubjectPublicKeyClasses",
    "AllowedHashTypes", "TypeAlias", "ExtensionErrors",
    "get_utc_datetime", "get_utc_datetime_opt",
    "valid_issuer_private_key", "valid_subject_public_key",
)


# keys that can sign certificates
IssuerPrivateKeyTypes: TypeAlias = Union[
    ec.EllipticCurvePrivateKey, rsa.RSAPrivateKey, dsa.DSAPrivateKey,
    ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey,
]
IssuerPrivateKeyClasses: Tuple[Type[IssuerPrivateKeyTypes], ...] = (
    ec.EllipticCurvePrivateKey, rsa.RSAPrivateKey, dsa.DSAPrivateKey,
    ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey,
)
IssuerPublicKeyTypes: TypeAlias = Union[
    ec.EllipticCurvePublicKey, rsa.RSAPublicKey, dsa.DSAPublicKey,
    ed25519.Ed25519PublicKey, ed448.Ed448PublicKey,
]
IssuerPublicKeyClasses: Tuple[Type[IssuerPublicKeyTypes], ...] = (
    ec.EllipticCurvePublicKey, rsa.RSAPublicKey, dsa.DSAPublicKey,
    ed25519.Ed25519PublicKey, ed448.Ed448PublicKey,
)

# keys that can appear in certificates
SubjectPublicKeyTypes: TypeAlias = Union[
    IssuerPublicKeyTypes, x25519.X25519PublicKey, x448.X448PublicKey
]
SubjectPublicKeyClasses: Tuple[Type[SubjectPublicKeyTypes], ...] = (
    IssuerPublicKeyClasses + (x25519.X25519PublicKey, x448.X448PublicKey)
)

AllPrivateKeyTypes: TypeAlias = Union[
    IssuerPrivateKeyTypes, x25519.X25519PrivateKey, x448.X448PrivateKey, dh.DHPrivateKey,
]
AllPublicKeyTypes: TypeAlias = Union[SubjectPublicKeyTypes, dh.DHPublicKey]

AllowedHashTypes: TypeAlias = Union[
    hashes.SHA256,
    hashes.SHA384,
    hashes.SHA512,
]

# raised when extensions of parsed certificate or request are accessed
ExtensionErrors: Tuple[Type[Exception], ...] = (
    ValueError, x509.DuplicateExtension, x509.UnsupportedGeneralNameType,
)


def get_utc_datetime_opt(obj: Any, field: str) -> Optional[datetime]:
    field_utc = field + "_utc"
    if hasattr(obj, field_utc):
        return cast(datetime, getattr(obj, field_utc))
    dt = getattr(obj, field)
    if dt is None:
        return None
    return cast(datetime, dt.replace(tzinfo=timezone.utc))


def get_utc_datetime(obj: Any, field: str) -> datetime:
    dt = get_utc_datetime_opt(obj, field)
    assert dt, "get_utc_datetime expects not-None"
    return dt


def valid_issuer_private_key(key: Any) -> IssuerPrivateKeyTypes:
    if isinstance(key, IssuerPrivateKeyClasses):
        return cast(IssuerPrivateKeyTypes, key)
    raise TypeError("Invalid private key type for issuer")


def valid_subject_public_key(key: Any) -> SubjectPublicKeyTypes:
    if isinstance(key, SubjectPublicKeyClasses):
        return cast(SubjectPublicKeyTypes, key)
    raise TypeError("Invalid public key type for subject")
