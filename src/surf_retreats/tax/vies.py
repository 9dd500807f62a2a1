"""
EU VIES registry lookups

VAT IDs of business customers are checked against the European
Commission's VIES ``checkVat`` SOAP service. The lookup fails open: when
the registry is unreachable or answers with an HTTP error the ID is
accepted on its format alone, so an outage never blocks a booking.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from lxml import etree

from surf_retreats.client.http_client import HttpClient, HttpRequestOptions
from surf_retreats.config.site_config import SiteConfig
from surf_retreats.exceptions import SurfRetreatsError
from surf_retreats.models.tax import VatValidationResult, ViesResult
from surf_retreats.tax.rates import is_eu_country
from surf_retreats.tax.vat_id import normalize_vat_id, validate_vat_format, vat_prefix

logger = logging.getLogger(__name__)

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
CHECK_VAT_NS = "urn:ec.europa.eu:taxud:vies:services:checkVat:types"


def build_check_vat_envelope(country_code: str, vat_number: str) -> bytes:
    """Build the SOAP request body for ``checkVat``"""
    nsmap = {"soapenv": SOAP_ENV_NS, "urn": CHECK_VAT_NS}
    envelope = etree.Element(f"{{{SOAP_ENV_NS}}}Envelope", nsmap=nsmap)
    etree.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Header")
    body = etree.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body")
    check = etree.SubElement(body, f"{{{CHECK_VAT_NS}}}checkVat")
    etree.SubElement(check, f"{{{CHECK_VAT_NS}}}countryCode").text = country_code
    etree.SubElement(check, f"{{{CHECK_VAT_NS}}}vatNumber").text = vat_number
    return etree.tostring(envelope, xml_declaration=True, encoding="UTF-8")


def _find_text(root: etree._Element, name: str) -> Optional[str]:
    # Namespace prefixes vary between VIES releases; match on local name
    for element in root.iter():
        if isinstance(element.tag, str) and etree.QName(element).localname == name:
            return element.text
    return None


def parse_check_vat_response(xml: bytes) -> Optional[ViesResult]:
    """
    Parse a ``checkVatResponse`` document

    Returns ``None`` when the document is not well-formed XML.
    """
    try:
        root = etree.fromstring(xml)
    except etree.XMLSyntaxError:
        return None

    valid = (_find_text(root, "valid") or "").strip().lower() == "true"
    return ViesResult(
        valid=valid,
        name=_find_text(root, "name"),
        address=_find_text(root, "address"),
    )


class ViesClient:
    """
    Client for the VIES ``checkVat`` service

    Example:
        >>> client = ViesClient(config)
        >>> result = client.check("DE123456789", "DE")
        >>> result.valid
    """

    def __init__(self, config: SiteConfig, http: Optional[HttpClient] = None) -> None:
        self.config = config
        self._http = http or HttpClient(
            config,
            base_url=config.vies_url,
            default_headers={"Content-Type": "text/xml;charset=UTF-8", "SOAPAction": ""},
        )

    def check(self, vat_id: str, country: str) -> ViesResult:
        """
        Look a VAT ID up in the registry

        Args:
            vat_id: VAT ID, with or without the country prefix
            country: ISO alpha-2 billing country

        Returns:
            Registry answer; ``valid=True`` without company data when the
            registry could not be reached
        """
        normalized = normalize_vat_id(vat_id)
        country_code = vat_prefix(country)
        vat_number = (
            normalized[len(country_code):]
            if normalized.startswith(country_code)
            else normalized
        )

        try:
            response = self._http.post(
                "",
                content=build_check_vat_envelope(country_code, vat_number),
                options=HttpRequestOptions(headers={"Accept": "text/xml"}),
            )
        except SurfRetreatsError as e:
            logger.error("VIES lookup failed, accepting VAT ID on format only: %s", e.get_description())
            return ViesResult(valid=True)

        payload = response.data
        if isinstance(payload, str):
            payload = payload.encode("utf-8")

        parsed = parse_check_vat_response(payload)
        if parsed is None:
            logger.error("VIES returned an unparseable response, accepting VAT ID on format only")
            return ViesResult(valid=True)

        return parsed.model_copy(update={
            "country_code": country_code,
            "vat_number": vat_number,
            "request_date": datetime.now(timezone.utc).isoformat(),
        })

    def close(self) -> None:
        self._http.close()


def validate_vat_id(vat_id: Optional[str], country: Optional[str], client: ViesClient) -> VatValidationResult:
    """
    Validate a business customer's VAT ID: required fields, EU membership,
    local format, then the VIES registry

    Args:
        vat_id: VAT ID as submitted
        country: Billing country as submitted
        client: VIES client used for the registry lookup

    Returns:
        Validation result in the shape returned to the booking form
    """
    if not vat_id or not country:
        return VatValidationResult(valid=False, error="VAT ID and country are required")

    normalized_vat_id = vat_id.strip().upper()
    normalized_country = country.upper()

    if not is_eu_country(normalized_country):
        return VatValidationResult(
            valid=False,
            error="VAT ID validation is only available for EU countries",
        )

    format_result = validate_vat_format(normalized_vat_id, normalized_country)
    if not format_result.valid:
        return VatValidationResult(valid=False, error=format_result.error, format_valid=False)

    vies_result = client.check(normalized_vat_id, normalized_country)
    if not vies_result.valid:
        return VatValidationResult(
            valid=False,
            error="VAT ID not found in EU VIES database. Please check the number and try again.",
            format_valid=True,
        )

    return VatValidationResult(
        valid=True,
        vat_id=normalized_vat_id,
        country=normalized_country,
        company_name=vies_result.name or None,
        company_address=vies_result.address or None,
        validated_at=datetime.now(timezone.utc).isoformat(),
    )
