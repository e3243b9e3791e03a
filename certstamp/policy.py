"""Fixed issuance policy.

Every issued certificate gets these values, callers cannot override them.
"""

from datetime import datetime

__all__ = (
    "VALIDITY_YEARS", "KEY_USAGE", "EXTENDED_KEY_USAGE",
    "add_years",
)

# NotAfter = NotBefore + VALIDITY_YEARS calendar years
VALIDITY_YEARS = 1

# KeyUsage flags, names from objects.KU_FIELDS
KEY_USAGE = ("digital_signature", "crl_sign")

# ExtendedKeyUsage keywords, names from objects.XKU_CODE_TO_OID
EXTENDED_KEY_USAGE = ("server", "client")


def add_years(dt: datetime, years: int) -> datetime:
    """Move date by calendar years, Feb 29 overflows into Mar 1.
    """
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, month=3, day=1)
