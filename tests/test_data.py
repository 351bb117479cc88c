import tempfile
import unittest
from pathlib import Path

import pandas as pd

from core.data import (
    DecodeError,
    TransportError,
    decode_rows,
    get_source_files,
    list_sheets,
    load_dataset,
    native_cell,
    rows_to_csv,
)
from tests.helpers import xlsx_bytes


class DecodeTests(unittest.TestCase):
    def test_first_sheet_rows_keyed_by_header(self):
        raw = xlsx_bytes(
            [{"Name": "Alice", "Dept": "Eng"}, {"Name": "Bob", "Dept": "Sales"}],
            extra_sheets={"Other": [{"X": 1}]},
        )
        rows = decode_rows(raw, "people.xlsx")
        self.assertEqual(rows, [{"Name": "Alice", "Dept": "Eng"}, {"Name": "Bob", "Dept": "Sales"}])
        self.assertEqual(list_sheets(raw), ["Sheet1", "Other"])

    def test_cells_become_native_values(self):
        raw = xlsx_bytes(
            [
                {"Qty": 3, "Price": 2.5, "When": pd.Timestamp("2024-01-05"), "Note": "a"},
                {"Qty": None, "Price": 4.0, "When": pd.Timestamp("2024-01-06 13:30"), "Note": None},
            ]
        )
        rows = decode_rows(raw, "sample.xlsx")
        self.assertEqual(rows[0], {"Qty": 3, "Price": 2.5, "When": "2024-01-05", "Note": "a"})
        self.assertIsNone(rows[1]["Qty"])
        self.assertIsNone(rows[1]["Note"])
        self.assertEqual(rows[1]["Price"], 4)
        self.assertIsInstance(rows[1]["Price"], int)
        self.assertEqual(rows[1]["When"], "2024-01-06T13:30:00")

    def test_blank_rows_dropped(self):
        raw = xlsx_bytes([{"A": 1}, {"A": None}, {"A": 3}])
        self.assertEqual(decode_rows(raw, "gaps.xlsx"), [{"A": 1}, {"A": 3}])

    def test_csv_by_suffix(self):
        raw = b"Name,Age\nAlice,30\nBob,\n"
        self.assertEqual(decode_rows(raw, "people.csv"), [{"Name": "Alice", "Age": 30}, {"Name": "Bob", "Age": None}])

    def test_garbage_raises_decode_error(self):
        with self.assertRaises(DecodeError):
            decode_rows(b"<html>not found</html>", "data.xlsx")
        with self.assertRaises(DecodeError):
            list_sheets(b"nope", "data.xlsx")

    def test_native_cell(self):
        self.assertIsNone(native_cell(float("nan")))
        self.assertIsNone(native_cell(pd.NaT))
        self.assertIs(native_cell(True), True)
        self.assertEqual(native_cell("x"), "x")


class CsvExportTests(unittest.TestCase):
    def test_rows_to_csv_keeps_header_order(self):
        out = rows_to_csv([{"B": 1, "A": "x"}], ["B", "A"]).decode("utf-8")
        self.assertEqual(out.splitlines(), ["B,A", "1,x"])

    def test_empty_rows_keep_headers(self):
        out = rows_to_csv([], ["Name"]).decode("utf-8")
        self.assertEqual(out.strip(), "Name")


class LoadDatasetTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_reads_listed_file(self):
        (self.data_dir / "Employees-Table.xlsx").write_bytes(xlsx_bytes([{"Name": "Alice"}]))
        self.assertEqual(load_dataset("Employees-Table.xlsx", self.data_dir), ({"Name": "Alice"},))

    def test_unlisted_file_rejected(self):
        (self.data_dir / "other.xlsx").write_bytes(xlsx_bytes([{"Name": "Alice"}]))
        with self.assertRaises(TransportError) as ctx:
            load_dataset("other.xlsx", self.data_dir)
        self.assertEqual(ctx.exception.status, 404)

    def test_source_files_lists_existing_in_order(self):
        for name in ("Budget_vs_Actual.xlsx", "Execution-Dates.xlsx", "stray.xlsx"):
            (self.data_dir / name).write_bytes(b"x")
        found = [p.name for p in get_source_files(self.data_dir)]
        self.assertEqual(found, ["Execution-Dates.xlsx", "Budget_vs_Actual.xlsx"])

    def test_missing_file(self):
        with self.assertRaises(TransportError):
            load_dataset("Financial_Sample.xlsx", self.data_dir)


if __name__ == "__main__":
    unittest.main()
