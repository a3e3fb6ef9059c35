"""
Pattern deciding which strings are acceptable URIs.

The accepted surface is narrower than RFC 3986 in some places (only http and https schemes, a restricted userinfo
alphabet) and wider in others: the host may carry routing placeholders such as ``{host}`` and may be left out
entirely, so relative identifiers like ``container/path`` validate.
"""
import re
from typing import Any

_H16 = r"[0-9a-f]{1,4}"
_DEC_OCTET = r"(?:25[0-5]|(?:[1-9]|1[0-9]|2[0-4])?[0-9])"
_LS32 = r"(?:" + _H16 + ":" + _H16 + r"|" + _DEC_OCTET + r"(?:\." + _DEC_OCTET + r"){3})"


def _h16_run(count: str) -> str:
    return "(?:" + _H16 + ":)" + count


IPV6 = "(?:" + "|".join([
    _h16_run("{6}") + _LS32,
    "::" + _h16_run("{5}") + _LS32,
    "(?:" + _H16 + ")?::" + _h16_run("{4}") + _LS32,
    "(?:" + _h16_run("{0,1}") + _H16 + ")?::" + _h16_run("{3}") + _LS32,
    "(?:" + _h16_run("{0,2}") + _H16 + ")?::" + _h16_run("{2}") + _LS32,
    "(?:" + _h16_run("{0,3}") + _H16 + ")?::" + _H16 + ":" + _LS32,
    "(?:" + _h16_run("{0,4}") + _H16 + ")?::" + _LS32,
    "(?:" + _h16_run("{0,5}") + _H16 + ")?::" + _H16,
    "(?:" + _h16_run("{0,6}") + _H16 + ")?::",
]) + ")"

# [^\W_] is a Unicode letter or digit.
_URI_PATTERN = r"""
    (?:(?:http|https)://)?                                      # scheme
    (?:(?:(?:[^\W_]|[.-])+:)?(?:[^\W_]|[.-])+@)?                # basic auth
    (?:
        (?:[^\W_]|[-.{}$+<=>^`|~])+                             # domain name, punycode or placeholder
        |
        \d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}                      # IPv4 address
        |
        \[""" + IPV6 + r"""\]                                   # IPv6 address
    )?
    (?::[0-9]+)?                                                # port
    (?:/[\w\-.~!$&'{}()*+,;=:@%]*)*                             # path
    (?:\?[\w\-.~!$&'\[\]()*+,;=:@/?%]*)?                        # query
    (?:\#(?:[\w\-.~!$&'()*+,;=:@/?]|%[0-9a-f]{2})*)?            # fragment
"""

URI_REGEX = re.compile(_URI_PATTERN, re.VERBOSE | re.IGNORECASE)


def validate(candidate: Any) -> bool:
    """
    Check whether the candidate matches the URI grammar.

    :param candidate: The value to check. Anything other than a non-empty string is rejected.
    :return: True if the whole candidate matches, otherwise False.
    """
    if not isinstance(candidate, str) or not candidate:
        return False
    return URI_REGEX.fullmatch(candidate) is not None
