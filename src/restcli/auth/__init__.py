"""Authorization variants for generated commands.

See :mod:`restcli.auth.authorization` for the semantics of each variant.
"""

from restcli.auth.authorization import (
    NO_AUTHORIZATION,
    Authorization,
    HeaderCredential,
    NoAuthorization,
    UriUserInfo,
    parse_user_info,
)

__all__ = [
    "Authorization",
    "HeaderCredential",
    "NO_AUTHORIZATION",
    "NoAuthorization",
    "UriUserInfo",
    "parse_user_info",
]
