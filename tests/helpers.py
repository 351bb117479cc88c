import io
from typing import Dict, List

import pandas as pd


def xlsx_bytes(records: List[Dict[str, object]], extra_sheets: Dict[str, List[Dict[str, object]]] = None) -> bytes:
    """Build an in-memory workbook; ``records`` land on the first sheet."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(records).to_excel(writer, sheet_name="Sheet1", index=False)
        for name, rows in (extra_sheets or {}).items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, index=False)
    return buf.getvalue()


def numbered_rows(count: int) -> List[Dict[str, object]]:
    return [{"Id": i, "Name": f"Row {i}"} for i in range(1, count + 1)]
