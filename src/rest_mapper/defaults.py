import functools
import typing

import requests

from .config import Settings, get_settings
from .exceptions import TransportError
from .interfaces import AccessToken, Transport, TransportResponse
from .types import Headers, JSONValue, QueryParams


class BearerToken(AccessToken):
    """
    The simplest :py:class:`AccessToken`: a fixed bearer string.
    """

    _value: str

    @property
    def value(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<{len(self._value)} chars>)"

    def __init__(self, value: str):
        self._value = value


class RequestsTransport(Transport):
    """
    A :py:class:`Transport` backed by a :py:class:`requests.Session`.
    """

    session: requests.Session
    timeout: typing.Optional[float]
    verify: bool

    def request(
        self,
        method: str,
        url: str,
        params: typing.Optional[QueryParams] = None,
        headers: typing.Optional[Headers] = None,
        json: JSONValue = None,
    ) -> TransportResponse:
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                headers=headers,
                json=json,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            raise TransportError(f"{method} {url} returned {response.status_code}", response)
        return response

    @classmethod
    def from_settings(cls, settings: Settings) -> "RequestsTransport":
        session = requests.Session()
        session.headers.update({"User-Agent": settings.user_agent})
        session.headers.update(settings.default_headers)
        return cls(session, timeout=settings.timeout_seconds, verify=settings.verify_tls)

    def __init__(
        self,
        session: typing.Optional[requests.Session] = None,
        timeout: typing.Optional[float] = None,
        verify: bool = True,
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.verify = verify


@functools.lru_cache(maxsize=None)
def get_default_transport() -> Transport:
    return RequestsTransport.from_settings(get_settings())
