# storefront/utils/retry.py
import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


# tylko dla odczytow katalogu, koszyk i zamowienia nie sa ponawiane
def http_retry(attempts: int = 3, multiplier: float = 0.3, maximum: float = 3):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=multiplier, min=multiplier, max=maximum),
        retry=retry_if_exception_type(httpx.TransportError),
    )
