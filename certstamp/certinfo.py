"""Describe certificate contents as plain data.
"""

from typing import Any, Dict, List, Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from cryptography.x509.oid import ExtensionOID

from .compat import ExtensionErrors, get_utc_datetime
from .exceptions import MalformedInput
from .formats import render_name, render_serial, render_timestamp, to_hex
from .keys import get_key_name
from .objects import (
    extract_gnames, extract_key_usage, extract_name, extract_xkey_usage, oid_name,
)

__all__ = ("describe_certificate",)


def _version(cert: x509.Certificate) -> int:
    if cert.version == x509.Version.v1:
        return 1
    return 3


def _public_key_fields(cert: x509.Certificate) -> Dict[str, Optional[str]]:
    try:
        pubkey = cert.public_key()
    except (ValueError, UnsupportedAlgorithm):
        return {"public_key_algorithm": None, "public_key": None}
    pem = pubkey.public_bytes(Encoding.PEM, PublicFormat.SubjectPublicKeyInfo)
    return {
        "public_key_algorithm": get_key_name(pubkey),
        "public_key": pem.decode("ascii"),
    }


def describe_certificate(cert: x509.Certificate) -> Dict[str, Any]:
    """Collect standard fields of certificate into JSON-friendly dict.
    """
    subject = extract_name(cert.subject) or ()
    issuer = extract_name(cert.issuer) or ()
    info: Dict[str, Any] = {
        "version": _version(cert),
        "serial_number": cert.serial_number,
        "serial": render_serial(cert.serial_number),
        "subject": render_name(subject),
        "subject_rdns": [list(rdn) for rdn in subject],
        "issuer": render_name(issuer),
        "issuer_rdns": [list(rdn) for rdn in issuer],
        "not_valid_before": render_timestamp(get_utc_datetime(cert, "not_valid_before")),
        "not_valid_after": render_timestamp(get_utc_datetime(cert, "not_valid_after")),
        "is_ca": False,
        "path_length": None,
        "key_usage": [],
        "ext_key_usage": [],
        "dns_names": [],
        "email_addresses": [],
        "ip_addresses": [],
        "uris": [],
        "other_names": [],
        "subject_key_id": None,
        "authority_key_id": None,
        "signature_algorithm": oid_name(cert.signature_algorithm_oid),
        "signature": to_hex(cert.signature),
        "fingerprint_sha256": to_hex(cert.fingerprint(hashes.SHA256())),
        "other_extensions": [],
    }
    info.update(_public_key_fields(cert))

    try:
        extensions = list(cert.extensions)
    except ExtensionErrors as ex:
        raise MalformedInput("invalid certificate extensions: %s" % ex) from ex

    for ext in extensions:
        extobj = ext.value
        if ext.oid == ExtensionOID.BASIC_CONSTRAINTS:
            info["is_ca"] = extobj.ca
            info["path_length"] = extobj.path_length
        elif ext.oid == ExtensionOID.KEY_USAGE:
            info["key_usage"] = extract_key_usage(extobj)
        elif ext.oid == ExtensionOID.EXTENDED_KEY_USAGE:
            info["ext_key_usage"] = extract_xkey_usage(extobj)
        elif ext.oid == ExtensionOID.SUBJECT_ALTERNATIVE_NAME:
            _add_alt_names(info, extract_gnames(extobj) or [])
        elif ext.oid == ExtensionOID.SUBJECT_KEY_IDENTIFIER:
            info["subject_key_id"] = to_hex(extobj.digest)
        elif ext.oid == ExtensionOID.AUTHORITY_KEY_IDENTIFIER:
            info["authority_key_id"] = to_hex(extobj.key_identifier)
        else:
            info["other_extensions"].append(ext.oid.dotted_string)
    return info


def _add_alt_names(info: Dict[str, Any], gnames: List[str]) -> None:
    keys = {
        "dns": "dns_names",
        "email": "email_addresses",
        "ip": "ip_addresses",
        "uri": "uris",
    }
    for gn in gnames:
        kind, val = gn.split(":", 1)
        if kind in keys:
            info[keys[kind]].append(val)
        else:
            info["other_names"].append(gn)
