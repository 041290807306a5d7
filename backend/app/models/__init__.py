from app.models.barter import BarterOffer
from app.models.notification import Notification

__all__ = [
    "BarterOffer",
    "Notification",
]
