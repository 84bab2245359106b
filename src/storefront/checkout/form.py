"""Checkout form — validation of what the customer typed at checkout.

The form is an external contract, so it is a pydantic model rather than a
domain object. ``validate_checkout_form`` reports one message per field,
ready to show next to the input.
"""

import re

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from storefront.checkout.translator import Destination
from storefront.delivery.port import DeliveryType

PHONE_PATTERN = re.compile(r"^0[5-7][0-9]{8}$")

FIELD_MESSAGES = {
    "customer_name": "Full name is required",
    "customer_phone": "Enter a valid Algerian phone number (e.g. 0555 123 456)",
    "wilaya_id": "Please select a wilaya",
    "delivery_type": "Please select a delivery type",
    "commune": "Please select a baladia",
    "address": "Please enter your full address",
}


class CheckoutForm(BaseModel):
    customer_name: str = Field(default="", validate_default=True)
    customer_phone: str = Field(default="", validate_default=True)
    wilaya_id: int | None = Field(default=None, validate_default=True)
    wilaya_name: str = ""
    delivery_type: DeliveryType = DeliveryType.DOMICILE
    commune: str = Field(default="", validate_default=True)
    address: str = Field(default="", validate_default=True)
    notes: str | None = None

    @field_validator("customer_name")
    @classmethod
    def name_has_two_characters(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError(FIELD_MESSAGES["customer_name"])
        return value

    @field_validator("customer_phone")
    @classmethod
    def phone_is_algerian_mobile(cls, value: str) -> str:
        value = "".join(value.split())
        if not PHONE_PATTERN.match(value):
            raise ValueError(FIELD_MESSAGES["customer_phone"])
        return value

    @field_validator("wilaya_id")
    @classmethod
    def wilaya_selected(cls, value: int | None) -> int:
        if not value:
            raise ValueError(FIELD_MESSAGES["wilaya_id"])
        return value

    @field_validator("commune")
    @classmethod
    def commune_for_home_delivery(cls, value: str, info: ValidationInfo) -> str:
        if info.data.get("delivery_type") == DeliveryType.STOPDESK:
            return ""
        if not value.strip():
            raise ValueError(FIELD_MESSAGES["commune"])
        return value.strip()

    @field_validator("address")
    @classmethod
    def address_for_home_delivery(cls, value: str, info: ValidationInfo) -> str:
        if info.data.get("delivery_type") == DeliveryType.STOPDESK:
            return ""
        if len(value.strip()) < 5:
            raise ValueError(FIELD_MESSAGES["address"])
        return value.strip()

    def to_destination(self) -> Destination:
        return Destination(
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            wilaya_id=self.wilaya_id,
            wilaya_name=self.wilaya_name,
            delivery_type=self.delivery_type,
            commune=self.commune,
            address=self.address,
            notes=self.notes,
        )


def validate_checkout_form(data: dict) -> tuple[CheckoutForm | None, dict[str, str]]:
    """Return the cleaned form, or None plus a message per invalid field."""
    try:
        return CheckoutForm.model_validate(data), {}
    except ValidationError as exc:
        errors = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "form"
            errors.setdefault(field, FIELD_MESSAGES.get(field, error["msg"]))
        return None, errors
