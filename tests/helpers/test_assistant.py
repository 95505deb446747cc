from __future__ import annotations

from tests.helpers import helper_currency


class TestAssistant:
    """Central access point for ready-made domain objects in tests.

    Attributes:
        currency: Module with helper functions for Currency and CurrencyRegistry fixtures.

    All domain objects are created fresh by calling helper functions, so there is no shared
    mutable state between tests.
    """

    __test__ = False

    def __init__(self) -> None:
        self.currency = helper_currency


TEST_ASSISTANT = TestAssistant()
