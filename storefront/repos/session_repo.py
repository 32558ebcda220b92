# storefront/repos/session_repo.py
import json
from pathlib import Path

from storefront.domain.schemas import Credentials, UserRef
from storefront.utils.settings import SESSION_FILE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "authToken"
USER_KEY = "user"


class SessionRepo:
    """
    Trwaly stan klienta - dokladnie dwa klucze: token i zserializowany uzytkownik.
    Zadnych danych koszyka ani zamowien.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path or SESSION_FILE)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Nie mozna odczytac sesji {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def load(self) -> Credentials:
        data = self._read()
        token = data.get(TOKEN_KEY)
        raw_user = data.get(USER_KEY)

        #sesja tylko gdy sa oba klucze
        if not token or not raw_user:
            return Credentials()

        try:
            user = UserRef.model_validate(json.loads(raw_user))
        except (TypeError, ValueError) as e:
            # uszkodzony uzytkownik - czyscimy oba klucze
            logger.error(f"Uszkodzone dane uzytkownika w sesji, wylogowanie: {e}")
            self.clear()
            return Credentials()

        return Credentials(token=token, user=user)

    def save(self, token: str, user: UserRef | dict) -> Credentials:
        if isinstance(user, dict):
            user = UserRef.model_validate(user)
        self._write({TOKEN_KEY: token, USER_KEY: user.model_dump_json()})
        logger.info(f"Sesja zapisana dla {user.username or user.email or user.id}")
        return Credentials(token=token, user=user)

    def clear(self) -> None:
        data = self._read()
        data.pop(TOKEN_KEY, None)
        data.pop(USER_KEY, None)
        self._write(data)
        logger.info("Sesja wyczyszczona")
