"""Business identity defaults merged into invoices."""

from decimal import Decimal
from pydantic import BaseModel

from src.domain.invoice import Footer


class BusinessProfile(BaseModel):
    name: str = ""
    address: str = ""
    city: str = ""
    tax_id: str = ""
    website: str = ""
    email: str = ""
    phone: str = ""
    terms: str = ""
    default_currency: str = "US$"
    default_tax_percent: Decimal = Decimal("0")

    @classmethod
    def from_config(cls, config) -> "BusinessProfile":
        return cls(
            name=config.BUSINESS_NAME,
            address=config.BUSINESS_ADDRESS,
            city=config.BUSINESS_CITY,
            tax_id=config.BUSINESS_TAX_ID,
            website=config.BUSINESS_WEBSITE,
            email=config.BUSINESS_EMAIL,
            phone=config.BUSINESS_PHONE,
            terms=config.BUSINESS_TERMS,
            default_currency=config.DEFAULT_CURRENCY,
            default_tax_percent=Decimal(str(config.DEFAULT_TAX_PERCENT)),
        )

    def fill_footer(self, footer: Footer) -> Footer:
        """Return a copy of footer with empty identity fields taken from the profile"""
        return footer.model_copy(
            update={
                "business_name": footer.business_name or self.name,
                "address": footer.address or self.address,
                "city": footer.city or self.city,
                "tax_id": footer.tax_id or self.tax_id,
                "website": footer.website or self.website,
                "email": footer.email or self.email,
                "phone": footer.phone or self.phone,
                "terms": footer.terms or self.terms,
            }
        )
