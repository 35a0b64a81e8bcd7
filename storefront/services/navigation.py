AUTH_PATH = "/auth"
PRODUCTS_PATH = "/products"
ORDERS_PATH = "/orders"


class Redirect(Exception):
    """Warunek wejscia na strone niespelniony, UI ma przejsc pod target."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Redirect to {target}")
