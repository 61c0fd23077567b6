"""Lunch Money ledger client.

Only the one endpoint this tool needs is wrapped: updating a manually
tracked asset's balance.

    PUT /v1/assets/{id}   {"balance": "23500"}
"""

from __future__ import annotations

import logging

import requests

from src.common.config import LedgerSettings

logger = logging.getLogger(__name__)


def format_balance(amount: float) -> str:
    """Render an amount the way the ledger expects (no trailing ".0")."""
    amount = float(amount)
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)


class LunchMoneyClient:
    """Minimal Lunch Money API client backed by a requests.Session."""

    def __init__(
        self,
        token: str,
        settings: LedgerSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("Lunch Money API token is required")
        self.settings = settings or LedgerSettings()
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        })

    def update_asset_balance(self, asset_id: int, amount: float) -> bool:
        """Set an asset's balance.

        Args:
            asset_id: Lunch Money asset id.
            amount: New balance.

        Returns:
            True on success. Failures are logged and return False.
        """
        logger.info("updating %s to price: %s", asset_id, amount)

        url = f"{self.settings.base_url.rstrip('/')}/assets/{asset_id}"
        try:
            resp = self._session.put(
                url,
                json={"balance": format_balance(amount)},
                timeout=self.settings.request_timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.error("Error updating asset %s: %s", asset_id, e)
            return False
        except ValueError as e:
            logger.error("Error updating asset %s: invalid response body: %s", asset_id, e)
            return False

        if isinstance(data, dict) and data.get("error"):
            logger.error("Error updating asset: %s", data["error"])
            return False

        return True

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> LunchMoneyClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
