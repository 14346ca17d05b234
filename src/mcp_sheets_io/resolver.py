"""Decide whether a sheet title maps to an existing sheet or a new one."""

import random
from dataclasses import dataclass
from typing import AbstractSet, Optional, Union

from mcp_sheets_io.models import SheetDescriptor, SpreadsheetMeta

MAX_SHEET_ID = 2**31 - 1


@dataclass(frozen=True)
class ExistingSheet:
    descriptor: SheetDescriptor

    @property
    def sheet_id(self) -> int:
        return self.descriptor.sheet_id


@dataclass(frozen=True)
class NewSheet:
    title: str
    sheet_id: int


Resolution = Union[ExistingSheet, NewSheet]


class SheetResolver:
    """
    Resolve a sheet title against already-loaded metadata.

    New IDs are drawn uniformly from [0, 2^31 - 1], skipping IDs present in
    the metadata snapshot. The live spreadsheet is not re-checked, so two
    concurrent writers can still collide.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.SystemRandom()

    def resolve(self, meta: SpreadsheetMeta, desired_title: str) -> Resolution:
        existing = meta.find_sheet(desired_title)
        if existing is not None:
            return ExistingSheet(existing)
        return NewSheet(title=desired_title, sheet_id=self.new_sheet_id(meta.sheet_ids))

    def new_sheet_id(self, taken: AbstractSet[int] = frozenset()) -> int:
        while True:
            sheet_id = self.rng.randint(0, MAX_SHEET_ID)
            if sheet_id not in taken:
                return sheet_id
