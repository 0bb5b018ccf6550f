"""Propagation of seller locations onto their vehicle listings."""

from __future__ import annotations

import logging
from typing import Optional

from ...data.vehicle_store import VehicleStore

logger = logging.getLogger(__name__)


def sync_seller_coordinates(store: VehicleStore, account_number: Optional[str] = None) -> int:
    """Copy seller coordinates and contact details onto the seller's vehicles.

    Runs for every seller when ``account_number`` is omitted. Radius searches
    read the copied columns, so this must run after any seller location change
    before results reflect it. Re-running with no seller change updates nothing.

    Returns:
        Number of vehicle rows whose seller columns changed.
    """
    scope = f"seller {account_number}" if account_number is not None else "all sellers"
    if account_number is not None and store.get_seller(account_number) is None:
        logger.warning(f"Coordinate sync skipped: unknown seller {account_number}")
        return 0

    try:
        changed = store.sync_seller_coordinates(account_number)
    except Exception:
        logger.exception(f"sync_seller_coordinates failed for {scope}")
        raise

    logger.info(f"Synced seller coordinates to vehicles for {scope}: {changed} row(s) updated")
    return changed
