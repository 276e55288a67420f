"""
Base Page class for the Page Object Model.

Provides navigation and locator helpers shared by all page objects.
"""

from playwright.sync_api import Locator, Page


class BasePage:
    """
    Base class for all page objects.

    Attributes:
        page: Playwright page instance.
        base_url: Base URL of the application.
    """

    def __init__(self, page: Page, base_url: str):
        self.page = page
        self.base_url = base_url

    def navigate_to(self, path: str = "") -> None:
        """
        Navigate to a specific path.

        Args:
            path: URL path relative to base URL.
        """
        self.page.goto(f"{self.base_url}{path}")

    def get_by_test_id(self, test_id: str) -> Locator:
        """Get element by data-testid attribute."""
        return self.page.get_by_test_id(test_id)
