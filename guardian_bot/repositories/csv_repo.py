from __future__ import annotations
import os
import pandas as pd
from filelock import FileLock
from typing import Iterable

class CsvTable:
    """CSV-backed table. Every cell is read back as a string ("" for empty)."""

    def __init__(self, path: str, columns: list[str]):
        self.path = path
        self.columns = columns
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        # FileLock is re-entrant, so upsert() can hold it across read()+write()
        self.lock = FileLock(self.path + ".lock")
        if not os.path.exists(self.path):
            df = pd.DataFrame(columns=self.columns)
            with self.lock:
                df.to_csv(self.path, index=False)

    def read(self) -> pd.DataFrame:
        with self.lock:
            if not os.path.exists(self.path):
                return pd.DataFrame(columns=self.columns)
            return pd.read_csv(self.path, dtype=str, keep_default_na=False)

    def write(self, df: pd.DataFrame) -> None:
        # ensure schema before write
        for c in self.columns:
            if c not in df.columns:
                df[c] = ""
        df = df[self.columns]
        with self.lock:
            df.to_csv(self.path, index=False)

    def append_row(self, row: dict) -> None:
        with self.lock:
            df = self.read()
            new = pd.DataFrame([{c: _cell(row.get(c)) for c in self.columns}], dtype=str)
            df = new if df.empty else pd.concat([df, new], ignore_index=True)
            self.write(df)

    def _mask(self, df: pd.DataFrame, conds: dict):
        mask = None
        for k, v in conds.items():
            if k not in df.columns:
                return None
            m = df[k].astype(str) == _cell(v)
            mask = m if mask is None else (mask & m)
        return mask

    def upsert(self, key_cols: Iterable[str], row: dict, touch: dict | None = None) -> bool:
        """Insert or update the row matching `key_cols`. Returns False when nothing changed.

        `touch` columns (timestamps) are written only together with a real change.
        """
        keys = [key_cols] if isinstance(key_cols, str) else list(key_cols)
        with self.lock:
            df = self.read()
            mask = None if df.empty else self._mask(df, {k: row.get(k, "") for k in keys})
            if mask is None or not mask.any():
                self.append_row({**row, **(touch or {})})
                return True
            current = df.loc[mask].iloc[0]
            if all(str(current.get(col, "")) == _cell(val) for col, val in row.items()):
                return False
            for col, val in {**row, **(touch or {})}.items():
                if col not in df.columns:
                    df[col] = ""
                df.loc[mask, col] = _cell(val)
            self.write(df)
            return True

    def find(self, **conds) -> pd.DataFrame:
        df = self.read()
        if df.empty or not conds:
            return df
        mask = self._mask(df, conds)
        if mask is None:
            return df.iloc[0:0]
        return df[mask]

def _cell(v) -> str:
    return "" if v is None else str(v)
