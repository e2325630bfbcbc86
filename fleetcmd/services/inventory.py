"""Inventory loading from a header-bearing CSV file.

The first three columns are always device, user and password; the remaining
columns are the template's positional parameters, in column order.
"""

from __future__ import annotations

import csv
from pathlib import Path

from fleetcmd.exceptions import InventoryError
from fleetcmd.models.inventory import FIXED_COLUMNS, Inventory, InventoryRow
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)


def load_inventory(path: str | Path) -> Inventory:
    """Parse the whole inventory or raise :class:`InventoryError`.

    No partial inventory is ever returned: a row whose column count differs
    from the header fails the load.
    """
    p = Path(path)
    try:
        with p.open(newline="", encoding="utf-8-sig") as fh:
            records = [
                (lineno, [cell.strip() for cell in rec])
                for lineno, rec in enumerate(csv.reader(fh), start=1)
            ]
    except (OSError, csv.Error) as exc:
        raise InventoryError(f"Cannot read inventory {p}: {exc}") from exc

    records = [(n, rec) for n, rec in records if any(rec)]
    if not records:
        raise InventoryError(f"Inventory {p} has no header row")

    _, header = records[0]
    if len(header) < FIXED_COLUMNS:
        raise InventoryError(
            f"Inventory header needs at least device,user,password columns; "
            f"got {header}",
        )

    rows: list[InventoryRow] = []
    for lineno, rec in records[1:]:
        if len(rec) != len(header):
            raise InventoryError(
                f"{p}:{lineno}: expected {len(header)} columns, found {len(rec)}",
            )
        rows.append(
            InventoryRow(
                line=lineno,
                device=rec[0],
                user=rec[1],
                password=rec[2],
                params=tuple(rec[FIXED_COLUMNS:]),
            ),
        )

    inv = Inventory(header=header, rows=rows)
    log.info(
        "inventory.loaded",
        path=str(p),
        rows=len(inv),
        params=inv.param_names,
    )
    return inv


def read_targets(path: str | Path) -> list[str]:
    """Read a target list: one hostname or address per line."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise InventoryError(f"Cannot read target list {p}: {exc}") from exc
    return [line.strip() for line in text.splitlines() if line.strip()]
