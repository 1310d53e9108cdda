"""Tests for the command-line entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from cutlistedit.app.main import main
from cutlistedit.app.models import CompactPart, SavedCutlistData
from cutlistedit.app.services.excel_io import load_groups_xlsx
from cutlistedit.core.logging_config import default_log_path, setup_logging
from cutlistedit.io.json_store import JsonCutlistStore


def _seed(path: Path) -> str:
    store = JsonCutlistStore(path)
    data = SavedCutlistData(
        parts=[
            CompactPart(id="side", name="Side", length_mm=720, width_mm=560, material_id="10"),
            CompactPart(
                id="top",
                name="Top",
                length_mm=1200,
                width_mm=600,
                lamination_type="with-backer",
                material_id="10",
            ),
        ]
    )

    async def scenario():
        folder = await store.create_folder("Kitchens")
        project = await store.save_project("Smith", data, folder.id)
        return project.id

    return asyncio.run(scenario())


def test_projects_and_folders_listing(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    store_path = tmp_path / "cutlists.json"
    project_id = _seed(store_path)

    assert main(["--store", str(store_path), "projects"]) == 0
    output = capsys.readouterr().out
    assert project_id in output
    assert "[Kitchens]" in output
    assert "2 part(s)" in output

    assert main(["--store", str(store_path), "folders"]) == 0
    output = capsys.readouterr().out
    assert "Kitchens/  (1 project(s))" in output
    assert "(root)  (0 project(s))" in output


def test_export_writes_regrouped_workbook(tmp_path: Path) -> None:
    store_path = tmp_path / "cutlists.json"
    project_id = _seed(store_path)
    output = tmp_path / "smith.xlsx"

    assert main(["--store", str(store_path), "export", project_id, str(output)]) == 0

    groups = load_groups_xlsx(output)
    assert [group.board_type for group in groups] == ["16mm", "32mm-backer"]
    assert [[part.id for part in group.parts] for group in groups] == [["side"], ["top"]]


def test_export_unknown_project_fails(tmp_path: Path) -> None:
    store_path = tmp_path / "cutlists.json"
    _seed(store_path)

    assert main(["--store", str(store_path), "export", "nope", str(tmp_path / "x.xlsx")]) == 1


def test_log_file_option_writes_debug_log(tmp_path: Path) -> None:
    store_path = tmp_path / "cutlists.json"
    _seed(store_path)
    log_path = tmp_path / "logs" / "run.log"

    assert main(["--store", str(store_path), "-v", "--log-file", str(log_path), "folders"]) == 0

    text = log_path.read_text(encoding="utf-8")
    assert "Logging initialized" in text
    assert "cutlistedit" in text


def test_default_log_path_follows_data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CUTLISTEDIT_HOME", str(tmp_path))

    assert default_log_path() == tmp_path / "logs" / "cutlistedit.log"
    logger = setup_logging(logging.INFO, default_log_path())
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()

    assert "hello" in (tmp_path / "logs" / "cutlistedit.log").read_text(encoding="utf-8")
