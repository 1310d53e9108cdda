"""
Command-line entry point for CutlistEdit.

``python -m cutlistedit.app.main folders`` prints the saved-project folder
tree; ``projects`` lists saved cutlists and ``export`` writes a saved
cutlist's regrouped parts to an Excel workbook.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from cutlistedit import APP_NAME, __version__
from cutlistedit.app.models import CutlistFolder
from cutlistedit.app.services.excel_io import save_groups_xlsx
from cutlistedit.core.logging_config import default_log_path, setup_logging
from cutlistedit.io.json_store import JsonCutlistStore
from cutlistedit.services.group_conversion import (
    normalize_save_groups,
    regroup_parts_to_api_groups,
)
from cutlistedit.services.saved_projects import SavedProjectRepository
from cutlistedit.services.settings_registry import load_store_path

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cutlistedit", description=f"{APP_NAME} {__version__}")
    parser.add_argument("--store", type=Path, help="Saved cutlist store (JSON file).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--log-file",
        nargs="?",
        const=default_log_path(),
        type=Path,
        help="Also write logs to a file (default location when no path is given).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("folders", help="Print the folder tree.")

    projects = commands.add_parser("projects", help="List saved cutlists.")
    projects.add_argument("--folder", help="Only list projects in this folder id.")

    export = commands.add_parser("export", help="Export a saved cutlist to .xlsx.")
    export.add_argument("project_id")
    export.add_argument("output", type=Path)
    return parser


def _print_tree(
    repository: SavedProjectRepository, parent_id: Optional[str] = None, depth: int = 0
) -> None:
    children: list[CutlistFolder] = repository.folder_children(parent_id)
    for folder in children:
        count = len(repository.projects_in_folder(folder.id))
        print(f"{'  ' * depth}{folder.name}/  ({count} project(s))  [{folder.id}]")
        _print_tree(repository, folder.id, depth + 1)


async def _run(args: argparse.Namespace) -> int:
    store = JsonCutlistStore(args.store or load_store_path())
    repository = SavedProjectRepository(store)
    if not await repository.refresh():
        print(f"Could not read the cutlist store at {store.path}.", file=sys.stderr)
        return 1

    if args.command == "folders":
        _print_tree(repository)
        root_count = len(repository.projects_in_folder(None))
        print(f"(root)  ({root_count} project(s))")
        return 0

    if args.command == "projects":
        projects = (
            repository.projects_in_folder(args.folder)
            if args.folder
            else repository.projects
        )
        for project in projects:
            location = "/".join(item.name for item in repository.folder_path(project.folder_id))
            print(
                f"{project.id}  {project.name}  "
                f"[{location or 'root'}]  {len(project.data.parts)} part(s)  "
                f"{project.updated_at}"
            )
        return 0

    project = repository.get_project(args.project_id)
    if project is None:
        print(f"Saved cutlist '{args.project_id}' not found.", file=sys.stderr)
        return 1
    groups = normalize_save_groups(regroup_parts_to_api_groups(project.data.parts))
    try:
        written = save_groups_xlsx(groups, args.output)
    except OSError as exc:
        logger.error("Export failed: %s", exc)
        print(f"Could not write '{args.output}': {exc}", file=sys.stderr)
        return 1
    print(f"Exported {len(groups)} group(s) to {written}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Parse ``argv`` and run the requested command, returning the exit code."""
    args = _build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
