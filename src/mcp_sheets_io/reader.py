"""Single-range reads."""

from typing import Any, Dict

from mcp_sheets_io.gateway import SheetsGateway


class RangeReader:
    def __init__(self, gateway: SheetsGateway):
        self.gateway = gateway

    async def read_range(self, spreadsheet_id: str, range_expr: str) -> Dict[str, Any]:
        """Return {"range": <normalized A1 range>, "values": rows}; values is [] for empty ranges."""
        response = await self.gateway.get_values(spreadsheet_id, range_expr)
        return {"range": response.get("range"), "values": response.get("values") or []}
