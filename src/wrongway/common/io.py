"""
File I/O utilities for request batches and results.

Usage:
    from wrongway.common.io import read_requests, IncrementalJSONLWriter
"""

import json
from pathlib import Path
from typing import List, Dict, Any, Union

import pandas as pd


ROLE_SEPARATOR = "|"

PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# JSONL
# ---------------------------------------------------------------------------

def read_jsonl(path: PathLike) -> List[Dict[str, Any]]:
    """Read a JSONL file (one JSON object per line)."""
    records = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records


class IncrementalJSONLWriter:
    """
    Context manager for writing JSONL records incrementally with flush.

    Usage:
        with IncrementalJSONLWriter(path) as w:
            w.write({...})   # flushed immediately
    """

    def __init__(self, path: PathLike):
        self.path = path
        self.count = 0
        self._file = None

    def __enter__(self):
        self._file = open(self.path, "w", encoding="utf-8")
        return self

    def write(self, record: Dict[str, Any]) -> None:
        self._file.write(json.dumps(record, ensure_ascii=False) + "\n")
        self._file.flush()
        self.count += 1

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file:
            self._file.close()
        return False


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def read_json(path: PathLike) -> Any:
    """Read a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Request batches
# ---------------------------------------------------------------------------

def _params_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn one CSV row into request params.

    Roles are a single cell separated by "|" ("Artist|Curator"); empty cells
    (NaN) are dropped so ParamValidator reports them as missing.
    """
    params: Dict[str, Any] = {}
    for key, value in row.items():
        if pd.isna(value):
            continue
        params[key] = str(value).strip()
    if "roles" in params:
        params["roles"] = [r.strip() for r in params["roles"].split(ROLE_SEPARATOR) if r.strip()]
    return params


def read_requests(path: PathLike) -> List[Dict[str, Any]]:
    """
    Read joke request params from a .jsonl, .json or .csv file.

    JSON inputs may hold either bare params objects or {"params": {...}}
    envelopes (the HTTP request shape); both come back as bare params.

    Raises:
        ValueError: If the suffix is not supported
    """
    path = Path(path)
    suf = path.suffix.lower()

    if suf == ".csv":
        df = pd.read_csv(path, dtype=str)
        return [_params_from_row(row) for row in df.to_dict(orient="records")]

    if suf == ".jsonl":
        records = read_jsonl(path)
    elif suf == ".json":
        data = read_json(path)
        records = data if isinstance(data, list) else [data]
    else:
        raise ValueError(f"Unsupported file: {path}")

    return [r["params"] if isinstance(r, dict) and "params" in r else r for r in records]
