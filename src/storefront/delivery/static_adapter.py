"""Static delivery pricing — default tariff for the 58 wilayas.

Alger ships cheaper than the rest of the country. Operators can override
individual wilayas; overrides are flagged on the returned quote.
"""

import structlog

from storefront.delivery.port import DeliveryPricing, DeliveryQuote, DeliveryType

logger = structlog.get_logger(__name__)

ALGER_WILAYA_ID = 16

WILAYAS = {
    1: "Adrar",
    2: "Chlef",
    3: "Laghouat",
    4: "Oum El Bouaghi",
    5: "Batna",
    6: "Béjaïa",
    7: "Biskra",
    8: "Béchar",
    9: "Blida",
    10: "Bouira",
    11: "Tamanrasset",
    12: "Tébessa",
    13: "Tlemcen",
    14: "Tiaret",
    15: "Tizi Ouzou",
    16: "Alger",
    17: "Djelfa",
    18: "Jijel",
    19: "Sétif",
    20: "Saïda",
    21: "Skikda",
    22: "Sidi Bel Abbès",
    23: "Annaba",
    24: "Guelma",
    25: "Constantine",
    26: "Médéa",
    27: "Mostaganem",
    28: "M'Sila",
    29: "Mascara",
    30: "Ouargla",
    31: "Oran",
    32: "El Bayadh",
    33: "Illizi",
    34: "Bordj Bou Arréridj",
    35: "Boumerdès",
    36: "El Tarf",
    37: "Tindouf",
    38: "Tissemsilt",
    39: "El Oued",
    40: "Khenchela",
    41: "Souk Ahras",
    42: "Tipaza",
    43: "Mila",
    44: "Aïn Defla",
    45: "Naâma",
    46: "Aïn Témouchent",
    47: "Ghardaïa",
    48: "Relizane",
    49: "Timimoun",
    50: "Bordj Badji Mokhtar",
    51: "Ouled Djellal",
    52: "Béni Abbès",
    53: "In Salah",
    54: "In Guezzam",
    55: "Touggourt",
    56: "Djanet",
    57: "El M'Ghair",
    58: "El Meniaa",
}


def default_costs(wilaya_id: int) -> tuple[float, float]:
    """(domicile, stopdesk) before any override."""
    if wilaya_id == ALGER_WILAYA_ID:
        return 500.0, 400.0
    return 600.0, 450.0


class StaticDeliveryPricing(DeliveryPricing):
    def __init__(self):
        self.overrides: dict[int, tuple[float, float]] = {}

    def set_override(self, wilaya_id: int, domicile_cost: float, stopdesk_cost: float) -> None:
        if wilaya_id not in WILAYAS:
            raise ValueError(f"Unknown wilaya: {wilaya_id}")
        self.overrides[wilaya_id] = (domicile_cost, stopdesk_cost)
        logger.info(
            "Delivery cost overridden",
            wilaya_id=wilaya_id,
            domicile_cost=domicile_cost,
            stopdesk_cost=stopdesk_cost,
        )

    def clear_overrides(self) -> None:
        self.overrides.clear()

    def get_delivery_cost(self, wilaya_id: int, mode: DeliveryType | str) -> DeliveryQuote | None:
        DeliveryType(mode)  # reject unknown modes early
        name = WILAYAS.get(wilaya_id)
        if name is None:
            return None

        override = self.overrides.get(wilaya_id)
        domicile, stopdesk = override or default_costs(wilaya_id)
        return DeliveryQuote(
            wilaya_id=wilaya_id,
            wilaya_name=name,
            domicile_cost=domicile,
            stopdesk_cost=stopdesk,
            is_manual_override=override is not None,
        )

    def list_costs(self) -> list[DeliveryQuote]:
        """All wilayas, sorted by id."""
        return [self.get_delivery_cost(wilaya_id, DeliveryType.DOMICILE) for wilaya_id in sorted(WILAYAS)]
