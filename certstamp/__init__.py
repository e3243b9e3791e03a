"""certstamp - Issue X.509 certificates from signing requests.
"""

# pylint: disable=import-outside-toplevel

__version__ = "1.0"


def _version_info():
    """Info string for --version.
    """
    try:
        import cryptography
        cver = getattr(cryptography, "__version__", "?")
        return "%s (cryptography %s)" % (__version__, cver)
    except ImportError:
        return __version__ + " (no cryptography)"


FULL_VERSION = _version_info()
