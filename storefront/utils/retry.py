# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests

from storefront.utils.settings import HTTP_RETRY_ATTEMPTS


def http_retry(attempts: int | None = None):
    """
    Retry tylko dla zapytan (GET) - mutacje koszyka i zamowien nigdy nie sa ponawiane.
    Domyslnie 1 proba, czyli bez ponowien.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(1, attempts or HTTP_RETRY_ATTEMPTS)),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(
            (requests.ConnectionError, requests.Timeout)
        ),
    )
