"""Inventory data structures."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# device, user, password
FIXED_COLUMNS = 3


class InventoryRow(BaseModel):
    """One device: fixed connection prefix plus the template parameter tail."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(description="1-based line number in the source file")
    device: str
    user: str = ""
    password: str = Field(default="", repr=False)
    params: tuple[str, ...] = ()

    @property
    def has_credentials(self) -> bool:
        return bool(self.user) and bool(self.password)

    @property
    def missing_fields(self) -> list[str]:
        missing = []
        for name in ("device", "user", "password"):
            if not getattr(self, name):
                missing.append(name)
        return missing


class Inventory(BaseModel):
    """Ordered rows sharing the header's column layout."""

    header: list[str]
    rows: list[InventoryRow] = Field(default_factory=list)

    @property
    def param_names(self) -> list[str]:
        return self.header[FIXED_COLUMNS:]

    @property
    def param_width(self) -> int:
        return len(self.header) - FIXED_COLUMNS

    def __len__(self) -> int:
        return len(self.rows)
