# runegather/commands/system.py
from typing import Any, Dict, List

from runegather.commands.command_system import command
from runegather.config import FORMAT_ERROR, FORMAT_GRAY, FORMAT_RESET, FORMAT_TITLE
from runegather.core.journal import Journal


@command("help", ["h", "?"], "system", "Show help.\nUsage: help [command|category]")
def help_handler(args: List[str], context: Dict[str, Any]) -> str:
    processor = context["command_processor"]
    if args:
        return processor.get_command_help(" ".join(args))
    return processor.get_help_text()


@command("journal", ["log", "j"], "system", "Show the latest journal entries.\nUsage: journal [count]")
def journal_handler(args: List[str], context: Dict[str, Any]) -> str:
    journal: Journal = context["journal"]
    count = 10
    if args:
        try:
            count = max(1, int(args[0]))
        except ValueError:
            return f"{FORMAT_ERROR}'{args[0]}' is not a number.{FORMAT_RESET}"

    entries = journal.get_last_entries(count)
    if not entries:
        return f"{FORMAT_GRAY}The journal is empty.{FORMAT_RESET}"
    lines = [f"{FORMAT_TITLE}Journal{FORMAT_RESET}"]
    lines.extend(f"  {journal.format_entry(e)}" for e in entries)
    return "\n".join(lines)


@command("quit", ["q", "exit"], "system", "Stop gathering and leave.\nUsage: quit")
def quit_handler(args: List[str], context: Dict[str, Any]) -> str:
    game = context["game"]
    game.quit()
    return "Farewell."
