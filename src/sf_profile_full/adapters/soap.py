"""Metadata API connection over SOAP.

Implements the ``MetadataConnection`` protocol with ``readMetadata`` and
``listMetadata`` calls posted through ``httpx``. Responses are decoded into
the loosely-typed shape common to Metadata API clients:

- element attributes are collected under a ``"$"`` key
  (``{"$": {"xsi:type": "Profile"}, ...}``),
- a repeated child element becomes a list, a single one a bare value,
- ``xsi:nil="true"`` elements become ``None``,
- leaf text stays a string.

Session establishment is not handled here; an access token and instance URL
must be supplied.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET
import httpx

from sf_profile_full.constants import (
    DEFAULT_API_VERSION,
    METADATA_NAMESPACE,
    NETWORK_TIMEOUT,
)
from sf_profile_full.exceptions import MetadataCallError

if TYPE_CHECKING:
    from sf_profile_full.config import FrozenConfig

log = logging.getLogger(__name__)

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
_ATTRIBUTE_PREFIXES = {XSI_NS: "xsi"}

_ENVELOPE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    f'<soapenv:Envelope xmlns:soapenv="{SOAP_ENV_NS}" xmlns:xsi="{XSI_NS}"'
    f' xmlns="{METADATA_NAMESPACE}">'
    "<soapenv:Header><SessionHeader><sessionId>{session}</sessionId>"
    "</SessionHeader></soapenv:Header>"
    "<soapenv:Body>{body}</soapenv:Body>"
    "</soapenv:Envelope>"
)


class SoapMetadataConnection:
    """Async Metadata API client for ``readMetadata`` and ``listMetadata``."""

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        *,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = NETWORK_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the connection.

        Args:
            instance_url: Org base URL, e.g. ``https://example.my.salesforce.com``.
            access_token: Session id or OAuth access token.
            api_version: Metadata API version.
            timeout: HTTP timeout in seconds for an internally created client.
            client: Optional pre-configured ``httpx.AsyncClient``; the caller
                keeps ownership of it.
        """
        if not instance_url or not access_token:
            raise ValueError("instance_url and access_token are required")
        self.endpoint = f"{instance_url.rstrip('/')}/services/Soap/m/{api_version}"
        self.api_version = api_version
        self._access_token = access_token
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: FrozenConfig) -> SoapMetadataConnection:
        """Build a connection from resolved configuration."""
        if not config.instance_url or not config.access_token:
            raise ValueError(
                "instance_url and access_token are required. Set "
                "SF_PROFILE_INSTANCE_URL and SF_PROFILE_ACCESS_TOKEN or provide "
                "them in [tool.sf_profile_full]."
            )
        return cls(
            config.instance_url,
            config.access_token,
            api_version=config.api_version,
            timeout=config.timeout,
        )

    def __repr__(self) -> str:
        """Representation without the access token."""
        return f"SoapMetadataConnection(endpoint={self.endpoint!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this connection created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # --- Metadata API operations ---

    async def read(self, type_name: str, full_names: list[str]) -> Any:
        """Call ``readMetadata``; returns a record, a list of records or None."""
        names = "".join(f"<fullNames>{escape(n)}</fullNames>" for n in full_names)
        body = f"<readMetadata><type>{escape(type_name)}</type>{names}</readMetadata>"
        result = await self._invoke("readMetadata", body)
        if isinstance(result, Mapping):
            return result.get("records")
        return None

    async def list(self, type_name: str) -> Any:
        """Call ``listMetadata``; returns a file property, a list of them or None."""
        body = (
            "<listMetadata><queries>"
            f"<type>{escape(type_name)}</type>"
            "</queries>"
            f"<asOfVersion>{escape(self.api_version)}</asOfVersion>"
            "</listMetadata>"
        )
        return await self._invoke("listMetadata", body)

    # --- Transport ---

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _invoke(self, operation: str, body: str) -> Any:
        envelope = _ENVELOPE.format(session=escape(self._access_token), body=body)
        headers = {"Content-Type": "text/xml; charset=utf-8", "SOAPAction": '""'}

        log.debug("POST %s (%s)", self.endpoint, operation)
        try:
            response = await self._get_client().post(
                self.endpoint, content=envelope.encode("utf-8"), headers=headers
            )
        except httpx.HTTPError as e:
            raise MetadataCallError(f"{operation} request failed: {e}", operation) from e

        try:
            root = SafeET.fromstring(response.content)
        except (SafeET.ParseError, DefusedXmlException) as e:
            if response.is_error:
                raise MetadataCallError(
                    f"{operation} failed with HTTP {response.status_code}", operation
                ) from e
            raise MetadataCallError(f"{operation} returned invalid XML: {e}", operation) from e

        fault = root.find(f"{{{SOAP_ENV_NS}}}Body/{{{SOAP_ENV_NS}}}Fault")
        if fault is not None:
            code = _child_text(fault, "faultcode") or "UNKNOWN"
            message = _child_text(fault, "faultstring") or "no fault string"
            raise MetadataCallError(f"{operation} fault {code}: {message}", operation)
        if response.is_error:
            raise MetadataCallError(
                f"{operation} failed with HTTP {response.status_code}", operation
            )

        return decode_response(root, operation)


def decode_response(envelope: ET.Element, operation: str) -> Any:
    """Decode the ``<result>`` element(s) of a SOAP response envelope."""
    response = envelope.find(
        f"{{{SOAP_ENV_NS}}}Body/{{{METADATA_NAMESPACE}}}{operation}Response"
    )
    if response is None:
        raise MetadataCallError(f"{operation} response has no {operation}Response", operation)

    results = [decode_element(el) for el in response.findall(f"{{{METADATA_NAMESPACE}}}result")]
    if not results:
        return None
    if len(results) == 1:
        return results[0]
    return results


def decode_element(element: ET.Element) -> Any:
    """Decode one element into a string, ``None`` or a mapping."""
    attrs = {_attribute_name(k): v for k, v in element.attrib.items()}
    if attrs.get("xsi:nil") == "true":
        return None

    children = list(element)
    if not children:
        text = element.text or ""
        if attrs and not text.strip():
            return {"$": attrs}
        return text

    decoded: dict[str, Any] = {}
    if attrs:
        decoded["$"] = attrs
    for child in children:
        name = _local_name(child.tag)
        value = decode_element(child)
        if name not in decoded:
            decoded[name] = value
        elif isinstance(decoded[name], list):
            decoded[name].append(value)
        else:
            decoded[name] = [decoded[name], value]
    return decoded


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


# Fault children may or may not inherit the envelope's default namespace
def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child.text
    return None


def _attribute_name(name: str) -> str:
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        prefix = _ATTRIBUTE_PREFIXES.get(namespace)
        return f"{prefix}:{local}" if prefix else local
    return name
