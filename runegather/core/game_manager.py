# runegather/core/game_manager.py
import queue
import sys
import threading
from typing import Any, Dict, List, Optional

import pygame

from runegather.catalog import CatalogProvider, JsonCatalogProvider
from runegather.commands.command_system import CommandProcessor
from runegather.config import DATA_DIR, DEFAULT_CHARACTER_ID, FORMAT_ERROR, FORMAT_RESET, MAX_FRAME_MS, TARGET_FPS
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.journal import Journal
from runegather.core.scheduler import Scheduler
from runegather.gathering.controller import GatherSessionController
from runegather.gathering.discovery import DiscoveryGateway, LocalDiscoveryGateway
from runegather.utils.logger import Logger
from runegather.utils.text_formatter import ConsoleFormatter
import runegather.commands  # noqa: F401  (registers the command handlers)


class GameManager:
    """
    Wires the gathering core together and runs it in a frame loop.

    The loop is headless: a pygame clock paces the frames and feeds real
    elapsed time to the scheduler, commands arrive from stdin through a
    reader thread, and output goes to the console.
    """

    def __init__(self, data_dir: str = DATA_DIR, character_id: str = DEFAULT_CHARACTER_ID,
                 location_id: Optional[str] = None,
                 gateway: Optional[DiscoveryGateway] = None,
                 catalog_provider: Optional[CatalogProvider] = None,
                 **controller_options: Any):
        self.event_system = EventSystem()
        self.scheduler = Scheduler()
        self.journal = Journal(self.event_system)
        self.gateway = gateway or LocalDiscoveryGateway()
        self.controller = GatherSessionController(
            self.event_system, self.scheduler, self.gateway, character_id, **controller_options)
        self.command_processor = CommandProcessor()

        self.catalog_provider = catalog_provider or JsonCatalogProvider(data_dir)
        self.location_id = location_id
        self.controller.load_catalog(self.catalog_provider, location_id)

        self.running = False
        self.clock: Optional[pygame.time.Clock] = None
        self.formatter = ConsoleFormatter(use_color=sys.stdout.isatty())
        self.input_queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._printed_entries = self.journal.written_count

        self.event_system.subscribe(events.AUTO_GATHER_CYCLE_COMPLETED, self._on_cycle_completed)

    # --- Frame loop ---

    def run(self):
        pygame.init()
        self.clock = pygame.time.Clock()
        self.running = True

        reader = threading.Thread(target=self._read_input, daemon=True)
        reader.start()
        self._print(self.command_processor.get_help_text())

        while self.running:
            dt_ms = self.clock.tick(TARGET_FPS)
            self._drain_input()
            self.update(dt_ms)
            self._print_new_journal_entries()

        self.shutdown()
        pygame.quit()

    def update(self, dt_ms: int) -> int:
        """Advance the gathering clock by one frame (clamped)."""
        return self.scheduler.update(min(dt_ms, MAX_FRAME_MS))

    def process_command(self, text: str) -> str:
        context: Dict[str, Any] = {
            "game": self,
            "controller": self.controller,
            "journal": self.journal,
            "command_processor": self.command_processor,
        }
        try:
            result = self.command_processor.process_input(text, context)
        except Exception as e:
            Logger.error("GameManager", f"Command '{text}' failed: {e}")
            result = f"{FORMAT_ERROR}Something went wrong: {e}{FORMAT_RESET}"
        # Entries already echoed by the command itself are not printed twice
        self._printed_entries = self.journal.written_count
        return result

    def quit(self):
        self.running = False

    def shutdown(self):
        if self.controller.auto_gather.is_running:
            self.controller.auto_gather.stop()
        self.controller.session.clear()
        self.scheduler.clear()

    # --- Console I/O ---

    def _read_input(self):
        for line in sys.stdin:
            self.input_queue.put(line.rstrip("\n"))
        self.input_queue.put(None)  # EOF

    def _drain_input(self):
        while True:
            try:
                line = self.input_queue.get_nowait()
            except queue.Empty:
                return
            if line is None:
                self.quit()
                return
            output = self.process_command(line)
            if output:
                self._print(output)

    def _print_new_journal_entries(self):
        fresh = self.journal.written_count - self._printed_entries
        if fresh <= 0:
            return
        entries: List = self.journal.entries[:fresh]
        for entry in reversed(entries):
            self._print(entry.text)
        self._printed_entries = self.journal.written_count

    def _print(self, text: str):
        print(self.formatter.format(text))

    def _on_cycle_completed(self, event_type: str, data: Dict[str, Any]):
        Logger.info("GameManager", f"Auto-gathering cycle {data['cycles_completed']} complete.")
