"""Cryptographic primitives used by issuance.

Issuance code talks only to a CryptoBackend, so the primitives can be
replaced without touching template or signer logic.
"""

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .compat import IssuerPrivateKeyTypes, SubjectPublicKeyTypes
from .keys import get_hash_algo

__all__ = ("CryptoBackend", "DefaultBackend")


class CryptoBackend:
    """Abstract capability interface for key encoding, signing and verification."""

    def public_key_info(self, pubkey: SubjectPublicKeyTypes) -> bytes:
        """Encode public key as DER SubjectPublicKeyInfo."""
        raise NotImplementedError

    def key_identifier(self, pubkey: SubjectPublicKeyTypes) -> bytes:
        """SHA-1 digest of the subjectPublicKey bit string."""
        raise NotImplementedError

    def sign(self, builder: x509.CertificateBuilder, privkey: IssuerPrivateKeyTypes) -> x509.Certificate:
        """Sign to-be-signed certificate with issuer key."""
        raise NotImplementedError

    def verify(self, cert: x509.Certificate, issuer: x509.Certificate) -> None:
        """Check that issuer signed cert, raise InvalidSignature on mismatch.

        Self-signed certificates are passed as their own issuer.
        """
        raise NotImplementedError


class DefaultBackend(CryptoBackend):
    """Backend on top of the cryptography package."""

    def public_key_info(self, pubkey: SubjectPublicKeyTypes) -> bytes:
        return pubkey.public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)

    def key_identifier(self, pubkey: SubjectPublicKeyTypes) -> bytes:
        # RFC 5280 4.2.1.2 method (1)
        return x509.SubjectKeyIdentifier.from_public_key(pubkey).digest

    def sign(self, builder: x509.CertificateBuilder, privkey: IssuerPrivateKeyTypes) -> x509.Certificate:
        return builder.sign(private_key=privkey, algorithm=get_hash_algo(privkey))

    def verify(self, cert: x509.Certificate, issuer: x509.Certificate) -> None:
        cert.verify_directly_issued_by(issuer)
