
import pytest
from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import x25519
from helpers import new_ca, new_csr, new_key

import certstamp.api as certstamp
from certstamp.signer import issuer_key_id


def make_template(key, **kwargs):
    csr = new_csr(key, **kwargs)
    ski = certstamp.subject_key_id(csr.public_key())
    return certstamp.build_template(csr, ski, certstamp.new_serial_number())


def get_ext(cert, cls):
    return cert.extensions.get_extension_for_class(cls).value


@pytest.mark.parametrize("ktype", ["ec", "ec384", "rsa", "ed25519"])
def test_self_signed(ktype):
    key = new_key(ktype)
    tpl = make_template(key)
    cert = certstamp.sign_template(tpl, key, self_sign=True)

    assert cert.issuer == cert.subject == tpl.subject
    assert cert.serial_number == tpl.serial_number
    assert get_ext(cert, x509.BasicConstraints).ca is True
    ski = get_ext(cert, x509.SubjectKeyIdentifier).digest
    aki = get_ext(cert, x509.AuthorityKeyIdentifier).key_identifier
    assert ski == aki == tpl.subject_key_id
    cert.verify_directly_issued_by(cert)


def test_chained():
    ca_key, ca_cert = new_ca()
    key = new_key()
    tpl = make_template(key)
    cert = certstamp.sign_template(tpl, ca_key, parent=ca_cert)

    assert cert.issuer == ca_cert.subject
    assert get_ext(cert, x509.BasicConstraints).ca is False
    assert get_ext(cert, x509.SubjectKeyIdentifier).digest == certstamp.subject_key_id(key.public_key())
    assert get_ext(cert, x509.AuthorityKeyIdentifier).key_identifier == issuer_key_id(ca_cert)
    cert.verify_directly_issued_by(ca_cert)


def test_chained_rsa_issuer():
    ca_key, ca_cert = new_ca(ktype="rsa")
    tpl = make_template(new_key("ed25519"))
    cert = certstamp.sign_template(tpl, ca_key, parent=ca_cert)
    assert cert.signature_hash_algorithm.name == "sha256"
    cert.verify_directly_issued_by(ca_cert)


def test_chained_parent_without_ski():
    ca_key, ca_cert = new_ca(with_ski=False)
    assert issuer_key_id(ca_cert) is None
    cert = certstamp.sign_template(make_template(new_key()), ca_key, parent=ca_cert)
    with pytest.raises(x509.ExtensionNotFound):
        cert.extensions.get_extension_for_class(x509.AuthorityKeyIdentifier)
    cert.verify_directly_issued_by(ca_cert)


def test_self_sign_wrong_key():
    tpl = make_template(new_key())
    with pytest.raises(certstamp.SigningError, match="does not match"):
        certstamp.sign_template(tpl, new_key(), self_sign=True)


def test_chained_wrong_key():
    _, ca_cert = new_ca()
    tpl = make_template(new_key())
    with pytest.raises(certstamp.SigningError, match="does not match"):
        certstamp.sign_template(tpl, new_key(), parent=ca_cert)


def test_chained_no_parent():
    key = new_key()
    with pytest.raises(certstamp.SigningError):
        certstamp.sign_template(make_template(key), key)


def test_unusable_issuer_key():
    tpl = make_template(new_key())
    with pytest.raises(certstamp.SigningError) as exc:
        certstamp.sign_template(tpl, x25519.X25519PrivateKey.generate(), self_sign=True)
    assert exc.value.kind == certstamp.ErrorKind.SIGNING
    assert "x25519" in str(exc.value)


def test_backend_sign_failure():
    class BrokenBackend(certstamp.DefaultBackend):
        def sign(self, builder, privkey):
            raise ValueError("no signature for you")

    key = new_key()
    with pytest.raises(certstamp.SigningError, match="no signature"):
        certstamp.sign_template(make_template(key), key, self_sign=True, backend=BrokenBackend())


def test_backend_bad_signature():
    class LyingBackend(certstamp.DefaultBackend):
        def verify(self, cert, issuer):
            raise InvalidSignature()

    key = new_key()
    with pytest.raises(certstamp.SigningError, match="invalid"):
        certstamp.sign_template(make_template(key), key, self_sign=True, backend=LyingBackend())


def test_serials_differ():
    key = new_key()
    c1 = certstamp.sign_template(make_template(key), key, self_sign=True)
    c2 = certstamp.sign_template(make_template(key), key, self_sign=True)
    assert c1.serial_number != c2.serial_number
    assert get_ext(c1, x509.SubjectKeyIdentifier) == get_ext(c2, x509.SubjectKeyIdentifier)


def test_backend_verify():
    backend = certstamp.DefaultBackend()
    ca_key, ca_cert = new_ca()
    _, other_ca = new_ca()
    cert = certstamp.sign_template(make_template(new_key()), ca_key, parent=ca_cert)
    backend.verify(cert, ca_cert)
    backend.verify(ca_cert, ca_cert)
    # same issuer name, different key
    with pytest.raises(InvalidSignature):
        backend.verify(cert, other_ca)
    # issuer name differs
    _, named_ca = new_ca("Other CA")
    with pytest.raises(ValueError):
        backend.verify(cert, named_ca)


def test_backend_verify_failure():
    class NameCheckBackend(certstamp.DefaultBackend):
        def verify(self, cert, issuer):
            raise ValueError("issuer name mismatch")

    key = new_key()
    with pytest.raises(certstamp.SigningError):
        certstamp.sign_template(make_template(key), key, self_sign=True, backend=NameCheckBackend())
