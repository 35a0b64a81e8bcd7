# storefront/services/notification_service.py
from dataclasses import dataclass
from typing import List

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SIGN_IN_REQUIRED = "Please sign in to add items to cart"
ADDED_TO_CART = "Added to cart"
ADD_FAILED = "Failed to add item to cart"
REMOVED_FROM_CART = "Removed from cart"
REMOVE_FAILED = "Failed to remove item"
UPDATE_FAILED = "Failed to update quantity"
ORDER_PLACED = "Order placed successfully!"
ORDER_FAILED = "Failed to place order. Please try again."


@dataclass(frozen=True)
class Notice:
    level: str  # success / error
    message: str


class NotificationService:
    """
    Krotkie, nieblokujace komunikaty dla uzytkownika (toasty).
    UI zbiera je przez drain(), kazdy jest tez logowany.
    """

    def __init__(self):
        self.notices: List[Notice] = []

    def success(self, message: str) -> None:
        logger.info(f"[NOTICE] {message}")
        self.notices.append(Notice("success", message))

    def error(self, message: str) -> None:
        logger.warning(f"[NOTICE] {message}")
        self.notices.append(Notice("error", message))

    def messages(self) -> List[str]:
        return [n.message for n in self.notices]

    def drain(self) -> List[Notice]:
        pending, self.notices = self.notices, []
        return pending
