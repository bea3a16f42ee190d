from typing import Optional


class Session:
    """
    Holds the authentication marker for one gateway.
    Set after a successful credential exchange, cleared on any 401.
    Plain assignments only: concurrent re-auths may both run, both end authenticated.
    """

    def __init__(self) -> None:
        self._marker: Optional[str] = None

    @property
    def marker(self) -> Optional[str]:
        return self._marker

    @property
    def authenticated(self) -> bool:
        return self._marker is not None

    def establish(self, marker: str) -> None:
        self._marker = marker

    def invalidate(self) -> None:
        self._marker = None
