from pricereports.models.observation import PriceObservation

__all__ = [
    "PriceObservation",
]
