"""Python objects <> display strings.
"""

import binascii
import re
from datetime import datetime, timezone
from typing import Iterable, Match, Optional, Sequence, Union

__all__ = (
    "as_bytes",
    "render_name", "render_serial", "render_timestamp",
    "to_hex", "ldap_to_string",
)


def as_bytes(s: Union[str, bytes]) -> bytes:
    """Return byte-string.
    """
    if not isinstance(s, bytes):
        return s.encode("utf8")
    return s


def render_serial(snum: int) -> str:
    """Format certificate serial number as string.
    """
    s = "%x" % snum
    s = "0" * (len(s) & 1) + s
    s = re.sub(r"..", r":\g<0>", s).strip(":")
    return s


def render_timestamp(dt: datetime) -> str:
    """ISO-8601 in UTC.
    """
    return dt.astimezone(timezone.utc).isoformat()


def to_hex(data: Optional[bytes]) -> Optional[str]:
    """Converts bytes to hex if not None
    """
    if data is None:
        return None
    if not isinstance(data, bytes):
        raise TypeError("Expect bytes")
    return binascii.b2a_hex(data).decode("ascii")


def render_name(name_att_list: Iterable[Sequence[str]], sep: str = ",") -> str:
    """Convert DistinguishedName dict to "," or "/"-separated string.
    """
    return ldap_to_string(name_att_list, sep)


#
# LDAP string representation of Distinguished Names from RFC4514
#

_ldap_allow_sep = (",", "/", "|")
_ldap_escape_rc = re.compile(r"""\A[ #]|[ ]\Z|["+;<>\\=\x00-\x1F\x7F-\x9F]""")


def _ldap_escape_fn(m: Match[str]) -> str:
    c = m.group()
    if c < "\x20" or c >= "\x7F":
        return "\\%02x" % ord(c)
    return "\\" + c


def _ldap_escape(s: str, sep: str) -> str:
    s = _ldap_escape_rc.sub(_ldap_escape_fn, s)
    if sep in s:
        s = s.replace(sep, "\\" + sep)
    return s


def ldap_to_string(mv_rdn: Iterable[Sequence[str]], rdnsep: str = ",") -> str:
    """Render RDN list using format from RFC4514.
    """
    if rdnsep not in _ldap_allow_sep:
        raise ValueError("Separator not supported")
    space = " "
    if rdnsep != ",":
        space = ""
    sep, mvsep, kvsep = "", space + "+" + space, space + "=" + space
    res = []
    for rdn in mv_rdn:
        while rdn:
            res.append(sep)
            k, v, rdn, sep = rdn[0], rdn[1], rdn[2:], mvsep
            res.append(_ldap_escape(k, rdnsep))
            res.append(kvsep)
            res.append(_ldap_escape(v, rdnsep))
        sep = rdnsep + space
    if rdnsep == ",":
        return "".join(res)
    return "%s%s%s" % (rdnsep, "".join(res), rdnsep)
