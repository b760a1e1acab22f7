"""
Dialog library.

Loads every dialog in a directory, scripts and compiled JSON alike.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from yarnspin.core.config import DialogConfig
from yarnspin.core.errors import LoadError
from yarnspin.core.events import EventBus
from yarnspin.runtime.commands import CommandRegistry
from yarnspin.runtime.runner import DialogRunner
from yarnspin.script.loader import load_file, load_json_file
from yarnspin.script.resolver import Dialog


class DialogLibrary:
    """
    Central storage for loaded dialogs, keyed by file stem.
    """

    def __init__(self, data_path: Path | str, config: Optional[DialogConfig] = None):
        self._data_path = Path(data_path)
        self.config = config or DialogConfig()
        self.dialogs: dict[str, Dialog] = {}
        self.failed: dict[str, str] = {}

        self.logger = logging.getLogger(__name__)

    def __contains__(self, dialog_id: object) -> bool:
        return dialog_id in self.dialogs

    def __len__(self) -> int:
        return len(self.dialogs)

    def load_all(self) -> int:
        """
        Load all dialogs from disk.

        Broken files are logged and skipped so one bad script does not
        take the rest down with it.

        Returns:
            Number of dialogs loaded
        """
        if not self._data_path.exists():
            self.logger.warning(f"Dialog directory not found: {self._data_path}")
            return 0

        count = 0
        for file_path in sorted(self._data_path.iterdir()):
            if file_path.suffix == self.config.script_extension:
                loader = load_file
            elif file_path.suffix == self.config.compiled_extension:
                loader = load_json_file
            else:
                continue

            dialog_id = file_path.stem
            if dialog_id in self.dialogs:
                self.logger.warning(f"Skipping {file_path}: dialog '{dialog_id}' already loaded")
                continue

            try:
                dialog = loader(file_path)
            except LoadError as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                self.failed[dialog_id] = str(e)
                continue

            dialog.id = dialog_id
            self.dialogs[dialog_id] = dialog
            self._check_reachability(dialog)
            count += 1

        self.logger.info(f"Loaded {count} dialogs, {len(self.failed)} failed.")
        return count

    def _check_reachability(self, dialog: Dialog) -> None:
        if not self.config.warn_unreachable or self.config.start_node not in dialog:
            return
        unreachable = set(dialog.titles) - dialog.reachable_from(self.config.start_node)
        if unreachable:
            self.logger.warning(
                f"Dialog '{dialog.id}': nodes unreachable from "
                f"'{self.config.start_node}': {', '.join(sorted(unreachable))}"
            )

    def get(self, dialog_id: str) -> Dialog | None:
        return self.dialogs.get(dialog_id)

    def create_runner(
        self,
        dialog_id: str,
        start_node: Optional[str] = None,
        commands: Optional[CommandRegistry] = None,
        event_bus: Optional[EventBus] = None,
    ) -> DialogRunner:
        """
        Start a runner on a loaded dialog.

        Raises:
            KeyError: no dialog with that id was loaded
            StartingNodeNotFoundError: the start node does not exist
        """
        dialog = self.dialogs[dialog_id]
        return DialogRunner(
            dialog,
            start_node or self.config.start_node,
            commands=commands,
            event_bus=event_bus,
            config=self.config,
        )
