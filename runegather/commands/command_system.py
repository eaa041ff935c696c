# runegather/commands/command_system.py
from typing import Callable, List, Dict, Any, Optional
from functools import wraps

from runegather.config import FORMAT_CATEGORY, FORMAT_ERROR, FORMAT_HIGHLIGHT, FORMAT_RESET, FORMAT_TITLE, HELP_MAX_COMMANDS_PER_CATEGORY

# Dictionary to store all registered commands, keyed by name and by alias
registered_commands: Dict[str, Dict[str, Any]] = {}
command_groups: Dict[str, List[Dict[str, Any]]] = {
    "gathering": [], "auto": [], "info": [], "system": []
}

def command(name: str, aliases: Optional[List[str]] = None, category: str = "system",
            help_text: str = "No help available."):
    """
    Decorator for registering text commands.
    Handlers are called as handler(args, context) and return the text to show.
    """
    aliases = aliases or []

    def decorator(func: Callable[[List[str], Dict[str, Any]], str]):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        cmd_data = {
            "name": name,
            "aliases": aliases,
            "handler": wrapper,
            "help_text": help_text,
            "category": category,
        }
        wrapper._command_info = cmd_data # type: ignore

        registered_commands[name] = cmd_data
        for alias in aliases:
            registered_commands[alias] = cmd_data

        command_groups.setdefault(category, []).append(cmd_data)
        return wrapper
    return decorator

def get_registered_commands() -> Dict[str, Dict[str, Any]]:
    return registered_commands

def get_command_groups() -> Dict[str, List[Dict[str, Any]]]:
    return command_groups

def unregister_command(name: str) -> bool:
    """Unregister a command and all its aliases."""
    if name not in registered_commands:
        return False

    cmd_data = registered_commands[name]
    for key in [cmd_data["name"]] + cmd_data["aliases"]:
        registered_commands.pop(key, None)

    category = cmd_data["category"]
    if category in command_groups:
        command_groups[category] = [c for c in command_groups[category] if c["name"] != cmd_data["name"]]
    return True

class CommandProcessor:
    """Processes user input and dispatches commands to their handlers."""

    def process_input(self, text: str, context: Optional[Dict[str, Any]] = None) -> str:
        """
        Dispatch the input with a longest-match-first strategy so multi-word
        command names win over their first word.
        Arguments keep their original case; command words are matched lowercase.
        """
        text = text.strip()
        if not text: return ""
        raw_parts = text.split()
        parts = [p.lower() for p in raw_parts]

        for i in range(len(parts), 0, -1):
            potential_cmd = " ".join(parts[:i])
            if potential_cmd in registered_commands:
                cmd_data = registered_commands[potential_cmd]
                args = raw_parts[i:]

                if context is not None:
                    context['executed_command_name'] = cmd_data['name']
                return cmd_data["handler"](args, context)

        return f"{FORMAT_ERROR}Unknown command: {parts[0]}{FORMAT_RESET}"

    def get_help_text(self) -> str:
        """Top-level help: categories with a few example commands each."""
        help_text = f"{FORMAT_TITLE}===== Runic Gathering Help ====={FORMAT_RESET}\n\n"
        help_text += f"  - Type '{FORMAT_HIGHLIGHT}help <category>{FORMAT_RESET}' for all commands in a category.\n"
        help_text += f"  - Type '{FORMAT_HIGHLIGHT}help <command>{FORMAT_RESET}' for details on a specific command.\n\n"
        help_text += f"{FORMAT_TITLE}Command Categories:{FORMAT_RESET}\n"

        categories = sorted([cat for cat, cmds in command_groups.items() if cmds])
        for category in categories:
            names = sorted({cmd['name'] for cmd in command_groups[category]})
            shown = ", ".join(names[:HELP_MAX_COMMANDS_PER_CATEGORY])
            if len(names) > HELP_MAX_COMMANDS_PER_CATEGORY:
                shown += ", ..."
            help_text += f"  - {FORMAT_CATEGORY}{category.capitalize()}{FORMAT_RESET} ({FORMAT_HIGHLIGHT}{shown}{FORMAT_RESET})\n"

        help_text += f"\n{FORMAT_TITLE}Getting Started:{FORMAT_RESET}\n"
        help_text += f"  - {FORMAT_HIGHLIGHT}resources{FORMAT_RESET} to see what grows here\n"
        help_text += f"  - {FORMAT_HIGHLIGHT}select <resource>{FORMAT_RESET}, then {FORMAT_HIGHLIGHT}rune <element>{FORMAT_RESET} until the matrix resonates\n"
        help_text += f"  - {FORMAT_HIGHLIGHT}mark <resource>{FORMAT_RESET} up to three discovered resources, then {FORMAT_HIGHLIGHT}autogather{FORMAT_RESET}\n"
        return help_text

    def get_command_help(self, command_or_category_name: str) -> str:
        """Detailed help for a specific command OR a category."""
        name_lower = command_or_category_name.lower()

        if name_lower in command_groups and command_groups[name_lower]:
            return self._get_category_help(name_lower)

        if name_lower in registered_commands:
            cmd = registered_commands[name_lower]
            help_text = f"{FORMAT_TITLE}Command: {cmd['name'].upper()}{FORMAT_RESET}\n\n"
            help_text += f"{FORMAT_CATEGORY}Category:{FORMAT_RESET} {cmd['category'].capitalize()}\n"
            if cmd['aliases']:
                help_text += f"{FORMAT_CATEGORY}Aliases:{FORMAT_RESET} {', '.join(cmd['aliases'])}\n"
            help_text += f"\n{FORMAT_CATEGORY}Description:{FORMAT_RESET}\n"
            for line in cmd['help_text'].split('\n'):
                help_text += f"  {line}\n"
            return help_text

        return f"{FORMAT_ERROR}No help found for '{command_or_category_name}'.{FORMAT_RESET}\nType '{FORMAT_HIGHLIGHT}help{FORMAT_RESET}' for available categories."

    def get_command_suggestions(self, partial_command: str) -> List[str]:
        """Commands, aliases and categories starting with the given text."""
        partial = partial_command.lower()
        suggestions = set()
        for cmd_data in registered_commands.values():
            if cmd_data['name'].startswith(partial): suggestions.add(cmd_data['name'])
            for alias in cmd_data['aliases']:
                if alias.startswith(partial): suggestions.add(alias)
        for category_name in command_groups:
            if category_name.startswith(partial): suggestions.add(category_name)
        return sorted(suggestions)

    def _get_category_help(self, category_name: str) -> str:
        commands_in_category = command_groups[category_name]
        help_text = f"{FORMAT_TITLE}Help: {category_name.capitalize()} Commands{FORMAT_RESET}\n\n"

        unique_commands = {}
        for cmd in commands_in_category:
            unique_commands.setdefault(cmd["name"], cmd)

        for cmd in sorted(unique_commands.values(), key=lambda c: c["name"]):
            aliases = f" ({', '.join(cmd['aliases'])})" if cmd['aliases'] else ""
            first_line_help = cmd['help_text'].split('\n')[0]
            help_text += f"  {FORMAT_HIGHLIGHT}{cmd['name']}{aliases}{FORMAT_RESET}\n"
            help_text += f"    - {first_line_help}\n"
        help_text += f"\nType '{FORMAT_HIGHLIGHT}help <command>{FORMAT_RESET}' for more details on a specific command."
        return help_text
