"""Python objects <> cryptography objects.
"""

import ipaddress
from typing import Dict, List, Optional, Sequence, Tuple

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID, ObjectIdentifier

from .formats import render_name, to_hex

__all__ = (
    "DN_CODE_TO_OID", "DN_OID_TO_CODE",
    "KU_FIELDS", "XKU_CODE_TO_OID",
    "extract_name", "extract_gnames", "extract_key_usage", "extract_xkey_usage",
    "make_key_usage", "oid_name", "split_san",
)


DN_CODE_TO_OID = {
    "CN": NameOID.COMMON_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "C": NameOID.COUNTRY_NAME,
    "L": NameOID.LOCALITY_NAME,
    "ST": NameOID.STATE_OR_PROVINCE_NAME,
    "STREET": NameOID.STREET_ADDRESS,
    "SN": NameOID.SURNAME,
    "GN": NameOID.GIVEN_NAME,
    "T": NameOID.TITLE,
    "DC": NameOID.DOMAIN_COMPONENT,
    "PC": NameOID.POSTAL_CODE,
    "SERIAL": NameOID.SERIAL_NUMBER,
    "UID": NameOID.USER_ID,
    "EMAIL": NameOID.EMAIL_ADDRESS,
}

DN_OID_TO_CODE = {v: k for k, v in DN_CODE_TO_OID.items()}

KU_FIELDS = [
    "digital_signature",    # non-CA signatures
    "content_commitment",   # old alias: non_repudiation
    "key_encipherment",     # SSL-RSA key exchange
    "data_encipherment",
    "key_agreement",
    "key_cert_sign",        # CA
    "crl_sign",             # CA
    "encipher_only",        # option for key_agreement
    "decipher_only",        # option for key_agreement
]

XKU_CODE_TO_OID = {
    "any": ExtendedKeyUsageOID.ANY_EXTENDED_KEY_USAGE,
    "server": ExtendedKeyUsageOID.SERVER_AUTH,
    "client": ExtendedKeyUsageOID.CLIENT_AUTH,
    "code": ExtendedKeyUsageOID.CODE_SIGNING,
    "email": ExtendedKeyUsageOID.EMAIL_PROTECTION,
    "time": ExtendedKeyUsageOID.TIME_STAMPING,
    "ocsp": ExtendedKeyUsageOID.OCSP_SIGNING,
}

XKU_OID_TO_CODE = {v: k for k, v in XKU_CODE_TO_OID.items()}


#
# Converters
#


def extract_name(name: Optional[x509.Name]) -> Optional[Tuple[Tuple[str, ...], ...]]:
    """Convert Name object to tuple of (key, value, ...) RDNs.
    """
    if name is None:
        return None
    if not isinstance(name, x509.Name):
        raise TypeError("Expect x509.Name")
    rdns = []
    for rdn in name.rdns:
        pairs: List[str] = []
        for att in rdn:
            value = att.value
            if isinstance(value, bytes):
                value = to_hex(value)
            pairs.append(DN_OID_TO_CODE.get(att.oid, att.oid.dotted_string))
            pairs.append(value)
        rdns.append(tuple(pairs))
    return tuple(rdns)


def extract_gnames(ext_name_list: Optional[Sequence[x509.GeneralName]]) -> Optional[List[str]]:
    """Convert list of GeneralNames to list of prefixed strings.
    """
    if ext_name_list is None:
        return None
    res = []
    for gn in ext_name_list:
        if isinstance(gn, x509.RFC822Name):
            res.append("email:" + gn.value)
        elif isinstance(gn, x509.DNSName):
            res.append("dns:" + gn.value)
        elif isinstance(gn, x509.UniformResourceIdentifier):
            res.append("uri:" + gn.value)
        elif isinstance(gn, x509.IPAddress):
            if isinstance(gn.value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
                res.append("net:" + str(gn.value))
            else:
                res.append("ip:" + str(gn.value))
        elif isinstance(gn, x509.DirectoryName):
            val = extract_name(gn.value)
            res.append("dn:" + render_name(val or (), "/"))
        elif isinstance(gn, x509.RegisteredID):
            res.append("rid:" + gn.value.dotted_string)
        elif isinstance(gn, x509.OtherName):
            res.append("othername:" + gn.type_id.dotted_string)
        else:
            res.append("unknown:" + repr(gn))
    return res


def split_san(ext: Optional[x509.SubjectAlternativeName]) -> Dict[str, list]:
    """Pick DNS names, email addresses and IP addresses out of SAN.

    Other GeneralName types are not carried over into issued certificates.
    """
    res: Dict[str, list] = {"dns_names": [], "email_addresses": [], "ip_addresses": []}
    if ext is None:
        return res
    res["dns_names"] = ext.get_values_for_type(x509.DNSName)
    res["email_addresses"] = ext.get_values_for_type(x509.RFC822Name)
    res["ip_addresses"] = [ip for ip in ext.get_values_for_type(x509.IPAddress)
                           if not isinstance(ip, (ipaddress.IPv4Network, ipaddress.IPv6Network))]
    return res


def extract_key_usage(ext: x509.KeyUsage) -> List[str]:
    """Extract list of tags from KeyUsage extension.
    """
    res: List[str] = []
    fields = KU_FIELDS[:]

    # "error-on-access", real funny
    if not ext.key_agreement:
        fields.remove("encipher_only")
        fields.remove("decipher_only")

    for k in fields:
        if getattr(ext, k, False):
            res.append(k)
    return res


def extract_xkey_usage(ext: x509.ExtendedKeyUsage) -> List[str]:
    """Walk oid list, return keywords, dotted string for unknown oids.
    """
    res: List[str] = []
    for oid in ext:
        if oid in XKU_OID_TO_CODE:
            res.append(XKU_OID_TO_CODE[oid])
        else:
            res.append(oid.dotted_string)
    return res


def make_key_usage(digital_signature: bool = False, content_commitment: bool = False,
                   key_encipherment: bool = False, data_encipherment: bool = False,
                   key_agreement: bool = False, key_cert_sign: bool = False,
                   crl_sign: bool = False, encipher_only: bool = False,
                   decipher_only: bool = False) -> x509.KeyUsage:
    """Default arguments for KeyUsage.
    """
    return x509.KeyUsage(digital_signature=digital_signature, content_commitment=content_commitment,
                         key_encipherment=key_encipherment, data_encipherment=data_encipherment,
                         key_agreement=key_agreement, key_cert_sign=key_cert_sign, crl_sign=crl_sign,
                         encipher_only=encipher_only, decipher_only=decipher_only)


def oid_name(oid: ObjectIdentifier) -> str:
    """Readable name for OID, dotted string when unknown.
    """
    name = getattr(oid, "_name", "")
    if not name or name == "Unknown OID":
        return oid.dotted_string
    return name
