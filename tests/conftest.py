from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import pytest

from tests.helpers.baselines import baseline_document, raw_entry

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clean_tokendiff_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("TOKENDIFF_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def previous_document() -> dict[str, object]:
    return baseline_document(
        {
            "V1:light": raw_entry("colors.primary", "#ffffff", variable_id="V1"),
            "V2:light": raw_entry("colors.secondary", "#000000", variable_id="V2"),
            "V3:light": raw_entry("colors.link", "{colors.primary}", variable_id="V3"),
        }
    )


@pytest.fixture
def current_document() -> dict[str, object]:
    return baseline_document(
        {
            "V1:light": raw_entry("colors.primary", "#eeeeee", variable_id="V1"),
            "V2:light": raw_entry("colors.secondary", "#000000", variable_id="V2"),
            "V3:light": raw_entry("colors.link", "{colors.primary}", variable_id="V3"),
        },
        synced_at="2025-02-01T00:00:00Z",
    )


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[str, object], Path]:
    def _write(name: str, document: object) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
