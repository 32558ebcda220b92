# storefront/views/navigation.py


class Navigator:
    """
    Nawigacja miedzy widokami. state to przejsciowy stan nawigacji - zyje tylko do
    nastepnego przejscia albo przeladowania, nigdy nie trafia na dysk.
    """

    def __init__(self, path: str = "/"):
        self.path = path
        self.state = None
        self.history: list[str] = [path]

    def go(self, path: str, state=None, replace: bool = False) -> None:
        if replace and self.history:
            self.history[-1] = path
        else:
            self.history.append(path)
        self.path = path
        self.state = state

    def reload(self) -> None:
        self.state = None
