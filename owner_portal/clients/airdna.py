"""
Airdna Rentalizer scraper.

Airdna offers no API for the Rentalizer, so the figures are read from the
rendered page in a headless browser. The page markup changes without notice;
treat every result as best-effort and expect ``None`` regularly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol
from urllib.parse import urlencode

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from owner_portal.core.config import AirdnaSettings

logger = logging.getLogger(__name__)

_EMAIL_SELECTOR = 'input#loginId, input[type="email"], input[name="email"]'
_PASSWORD_SELECTOR = 'input#password, input[type="password"], input[name="password"]'
_SUBMIT_SELECTOR = 'button[type="submit"]'

_FIGURE_LABELS = {
    "annual_revenue": "Annual Revenue",
    "average_occupancy": "Occupancy",
    "average_daily_rate": "ADR",
    "confidence_score": "Confidence Score",
    "operating_expenses": "Operating Expenses",
    "net_operating_income": "Net Operating Income",
    "cap_rate": "Cap Rate",
}

# Finds the element whose text is exactly the label and returns the first
# heading in its enclosing card, which is where the Rentalizer renders values.
_READ_FIGURE_JS = """
(label) => {
  const nodes = Array.from(document.querySelectorAll('p, span, div'));
  const match = nodes.find((node) => node.textContent.trim() === label);
  if (!match) return null;
  let container = match;
  for (let depth = 0; depth < 4 && container.parentElement; depth++) {
    container = container.parentElement;
    const value = container.querySelector('h3, h4, h6');
    if (value && value.textContent.trim()) return value.textContent.trim();
  }
  return null;
}
"""


@dataclass(frozen=True)
class IncomeEstimate:
    """Figures read from the Rentalizer; any of them may be missing."""

    address: str
    figures: Dict[str, Optional[str]] = field(default_factory=dict)

    def figure(self, name: str) -> Optional[str]:
        return self.figures.get(name)


class IncomeEstimator(Protocol):
    async def fetch_income_estimate(
        self, address: str, property_details: Dict[str, Any]
    ) -> Optional[IncomeEstimate]:
        ...


class AirdnaRentalizerClient:
    """Log into Airdna and read the Rentalizer estimate for an address."""

    def __init__(self, settings: AirdnaSettings) -> None:
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.configured

    async def fetch_income_estimate(
        self, address: str, property_details: Dict[str, Any]
    ) -> Optional[IncomeEstimate]:
        """Return the estimate, or ``None`` when it could not be read."""
        timeout_ms = self._settings.timeout_seconds * 1000
        query = {"address": address}
        query.update(
            {key: str(value) for key, value in property_details.items() if value}
        )

        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(
                    headless=True,
                    args=["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
                )
                try:
                    page = await browser.new_page(viewport={"width": 1280, "height": 800})
                    await page.goto(
                        self._settings.login_url,
                        wait_until="networkidle",
                        timeout=timeout_ms,
                    )
                    await page.fill(_EMAIL_SELECTOR, self._settings.email or "")
                    await page.fill(_PASSWORD_SELECTOR, self._settings.password or "")
                    await page.click(_SUBMIT_SELECTOR)
                    await page.wait_for_load_state("networkidle", timeout=timeout_ms)

                    await page.goto(
                        f"{self._settings.rentalizer_url}?{urlencode(query)}",
                        wait_until="networkidle",
                        timeout=timeout_ms,
                    )
                    figures = {
                        name: await page.evaluate(_READ_FIGURE_JS, label)
                        for name, label in _FIGURE_LABELS.items()
                    }
                finally:
                    await browser.close()
        except PlaywrightError as exc:
            logger.error("Airdna income estimate failed for %s: %s", address, exc)
            return None

        if not any(figures.values()):
            logger.warning("Airdna returned no figures for %s", address)
            return None
        return IncomeEstimate(address=address, figures=figures)


__all__ = ["AirdnaRentalizerClient", "IncomeEstimate", "IncomeEstimator"]
