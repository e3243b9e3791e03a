"""Key handling and identifier generation.
"""

import os
from typing import TYPE_CHECKING, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import (
    dh, dsa, ec, ed448, ed25519, rsa, x448, x25519,
)
from cryptography.hazmat.primitives.hashes import SHA256, SHA384, SHA512
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .compat import (
    AllowedHashTypes, AllPrivateKeyTypes, AllPublicKeyTypes,
    IssuerPrivateKeyTypes, SubjectPublicKeyTypes, valid_subject_public_key,
)
from .exceptions import IdentifierError

if TYPE_CHECKING:
    from .backend import CryptoBackend

__all__ = (
    "SERIAL_NUMBER_BITS",
    "new_serial_number", "subject_key_id",
    "get_hash_algo", "get_key_name", "same_pubkey",
)

# serial numbers are drawn from [0, 2**SERIAL_NUMBER_BITS)
SERIAL_NUMBER_BITS = 128


def new_serial_number() -> int:
    """Return uniformly random serial number below 2**128.
    """
    nbytes = SERIAL_NUMBER_BITS // 8
    while True:
        try:
            seed = os.urandom(nbytes)
        except (OSError, NotImplementedError) as ex:
            raise IdentifierError("failed to generate serial number: %s" % ex) from ex
        serial = int.from_bytes(seed, "big", signed=False)
        # zero is not accepted by CertificateBuilder
        if serial:
            return serial


def subject_key_id(pubkey: SubjectPublicKeyTypes, backend: Optional["CryptoBackend"] = None) -> bytes:
    """SHA-1 over subjectPublicKey bit string of SubjectPublicKeyInfo.

    Identical keys always produce identical identifiers.
    """
    if backend is None:
        from .backend import DefaultBackend
        backend = DefaultBackend()
    try:
        return backend.key_identifier(valid_subject_public_key(pubkey))
    except (TypeError, ValueError, UnsupportedAlgorithm) as ex:
        raise IdentifierError("cannot encode public key: %s" % ex) from ex


def get_hash_algo(privkey: IssuerPrivateKeyTypes) -> Optional[AllowedHashTypes]:
    """Return signature hash algo based on privkey.
    """
    if isinstance(privkey, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return None
    elif isinstance(privkey, ec.EllipticCurvePrivateKey):
        if privkey.key_size > 500:
            return SHA512()
        if privkey.key_size > 300:
            return SHA384()
    return SHA256()


def same_pubkey(k1: AllPublicKeyTypes, k2: AllPublicKeyTypes) -> bool:
    """Compare public keys.
    """
    fmt = PublicFormat.SubjectPublicKeyInfo
    return k1.public_bytes(Encoding.DER, fmt) == k2.public_bytes(Encoding.DER, fmt)


def get_key_name(key: Union[AllPublicKeyTypes, AllPrivateKeyTypes]) -> str:
    """Return key type.
    """
    if isinstance(key, (rsa.RSAPublicKey, rsa.RSAPrivateKey)):
        return "rsa:%d" % key.key_size
    if isinstance(key, (dsa.DSAPublicKey, dsa.DSAPrivateKey)):
        return "dsa:%d" % key.key_size
    if isinstance(key, (dh.DHPublicKey, dh.DHPrivateKey)):
        return "dh:%d" % key.key_size
    if isinstance(key, (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey)):
        return "ec:%s" % key.curve.name
    if isinstance(key, (ed25519.Ed25519PublicKey, ed25519.Ed25519PrivateKey)):
        return "ec:ed25519"
    if isinstance(key, (ed448.Ed448PublicKey, ed448.Ed448PrivateKey)):
        return "ec:ed448"
    if isinstance(key, (x25519.X25519PublicKey, x25519.X25519PrivateKey)):
        return "ec:x25519"
    if isinstance(key, (x448.X448PublicKey, x448.X448PrivateKey)):
        return "ec:x448"
    return "<unknown key type>"
