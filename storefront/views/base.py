# storefront/views/base.py
from storefront.domain.errors import AuthError, StorefrontError
from storefront.domain.schemas import CartChanged, Credentials
from storefront.services.notification_service import CartChannel
from storefront.views.navigation import Navigator
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

LOGIN_PATH = "/login"


class View:
    """
    Bezglowy widok: trzyma to, co UI by wyrenderowal (dane, banner bledu, przekierowanie).
    Widok z kanalem subskrybuje "koszyk sie zmienil" i na sygnal pobiera dane od nowa.
    """

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        channel: CartChannel | None = None,
    ):
        self.credentials = credentials
        self.navigator = navigator
        self.loading = False
        self.error: str | None = None
        self._subscription = channel.subscribe(self.on_cart_changed) if channel else None

    def on_cart_changed(self, event: CartChanged) -> None:
        self.refresh()

    def refresh(self) -> None:
        pass

    def close(self) -> None:
        """Odpiecie od kanalu przy zamknieciu widoku; trwajace zapytania nie sa przerywane."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def _require_login(self) -> bool:
        if self.credentials.is_authenticated:
            return True
        self.error = "Please log in to continue."
        self.navigator.go(LOGIN_PATH)
        return False

    def _run(self, action, *args, **kwargs):
        """Wykonuje akcje i zamienia bledy na stan widoku. Bez ponowien."""
        self.error = None
        self.loading = True
        try:
            return action(*args, **kwargs)
        except AuthError as e:
            self.error = e.message
            self.navigator.go(LOGIN_PATH)
        except StorefrontError as e:
            logger.warning(f"{type(self).__name__}: {type(e).__name__}: {e.message}")
            self.error = e.message
        finally:
            self.loading = False
        return None
