"""Tax computation models"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class TaxComputation(BaseModel):
    """Result of applying a country's VAT rate to an amount"""

    rate: Decimal = Field(..., description="Rate applied, as a fraction")
    tax_amount: Decimal = Field(..., description="Tax, rounded to cents")
    total: Decimal = Field(..., description="Amount plus tax, rounded to cents")

    model_config = {"frozen": True}


class CheckoutVat(TaxComputation):
    """VAT computed for a checkout, with the B2B reverse-charge flag"""

    is_reverse_charge: bool = Field(
        False, description="True when the buyer self-accounts for VAT"
    )


class VatFormatResult(BaseModel):
    """Outcome of the local VAT ID format check"""

    valid: bool = Field(..., description="Format matches the country pattern")
    error: Optional[str] = Field(None, description="Reason the format was rejected")

    model_config = {"frozen": True}


class ViesResult(BaseModel):
    """Answer from the EU VIES registry"""

    valid: bool = Field(..., description="Registry reports the number as valid")
    name: Optional[str] = Field(None, description="Registered company name")
    address: Optional[str] = Field(None, description="Registered company address")
    country_code: Optional[str] = Field(None, description="VIES country code (EL for Greece)")
    vat_number: Optional[str] = Field(None, description="Number without country prefix")
    request_date: Optional[str] = Field(None, description="Time of the lookup (ISO 8601)")


class VatValidationResult(BaseModel):
    """Combined format and registry validation of a VAT ID"""

    valid: bool = Field(..., description="VAT ID accepted")
    error: Optional[str] = Field(None, description="Reason for rejection")
    format_valid: Optional[bool] = Field(None, description="Result of the format check")
    vat_id: Optional[str] = Field(None, description="Normalized VAT ID")
    country: Optional[str] = Field(None, description="Normalized country code")
    company_name: Optional[str] = Field(None, description="Registered company name")
    company_address: Optional[str] = Field(None, description="Registered company address")
    validated_at: Optional[str] = Field(None, description="Validation time (ISO 8601)")
