"""HTTP client layer -- send resolved requests and deliver responses.

Sub-modules:

* :mod:`~restcli.client.transport` -- :class:`HttpTransport`, one blocking
  exchange per call over :class:`httpx.Client`.
* :mod:`~restcli.client.response` -- :func:`deliver_response`, body routing
  and status-code assertion.
"""

from restcli.client.response import deliver_response
from restcli.client.transport import HttpTransport

__all__ = ["HttpTransport", "deliver_response"]
