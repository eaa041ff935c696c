# runegather/commands/gathering.py
from typing import Any, Dict, List

from runegather.commands.command_system import command
from runegather.config import (
    FORMAT_CATEGORY, FORMAT_ERROR, FORMAT_GRAY, FORMAT_HIGHLIGHT, FORMAT_RESET, FORMAT_SUCCESS,
    FORMAT_TITLE, RARITY_FORMATS
)
from runegather.gathering.controller import GatherSessionController
from runegather.core.journal import Journal


def _feedback(journal: Journal, before: int, fallback: str) -> str:
    """Text of the journal entries written while the command ran, newest last."""
    new_entries = journal.entries[:journal.written_count - before]
    if new_entries:
        return "\n".join(e.text for e in reversed(new_entries))
    return fallback


def _progress_bar(progress: int, width: int = 20) -> str:
    filled = int(width * progress / 100)
    return "[" + "#" * filled + "." * (width - filled) + f"] {progress}%"


@command("resources", ["res", "ls"], "info", "List the resources that can be gathered here.\nUsage: resources")
def resources_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    catalog = controller.catalog
    if catalog.is_empty():
        return f"{FORMAT_GRAY}There is nothing to gather here.{FORMAT_RESET}"

    lines = [f"{FORMAT_TITLE}Resources{FORMAT_RESET}"]
    for resource in catalog.resources.values():
        color = RARITY_FORMATS.get(resource.rarity, FORMAT_HIGHLIGHT)
        marks = ""
        if resource is controller.session.target_resource:
            marks += " <selected>"
        if controller.auto_gather.is_member(resource.resource_id):
            position = controller.auto_gather.selected_for_auto.index(resource.resource_id) + 1
            marks += f" [auto #{position}]"
        if resource.discovered:
            combo = ", ".join(catalog.element_names(resource.required_combination))
            lines.append(f"  {color}{resource.name}{FORMAT_RESET} ({resource.rarity_label}) - {combo}{marks}")
        else:
            lines.append(f"  {color}{resource.name}{FORMAT_RESET} ({resource.rarity_label}) - {FORMAT_GRAY}undiscovered{FORMAT_RESET}{marks}")
    return "\n".join(lines)


@command("elements", ["runes", "matrix"], "info", "List the elements of the runic matrix.\nUsage: elements")
def elements_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    if not controller.catalog.elements:
        return f"{FORMAT_GRAY}The runic matrix is empty.{FORMAT_RESET}"
    selected = controller.session.selected_elements
    lines = [f"{FORMAT_TITLE}Runic Matrix{FORMAT_RESET}"]
    for element in controller.catalog.elements.values():
        count = selected.count(element.element_id)
        mark = f" {FORMAT_HIGHLIGHT}x{count}{FORMAT_RESET}" if count else ""
        lines.append(f"  {element.icon} {element.name} ({element.element_id}){mark}")
    return "\n".join(lines)


@command("select", ["target"], "gathering",
         "Select a resource to work on. Selecting it again deselects it.\n"
         "Known resources reveal their combination by themselves.\nUsage: select <resource>")
def select_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    journal: Journal = context["journal"]
    if not args: return f"{FORMAT_ERROR}Select which resource?{FORMAT_RESET}"

    name = " ".join(args)
    resource = controller.catalog.find_resource(name)
    if resource is None:
        return f"{FORMAT_ERROR}There is no '{name}' here.{FORMAT_RESET}"

    before = journal.written_count
    if not controller.select_resource(resource.resource_id):
        return _feedback(journal, before, f"{FORMAT_ERROR}You cannot select {resource.name} now.{FORMAT_RESET}")
    if controller.session.target_resource is None:
        return f"You set {resource.name} aside."
    if resource.discovered:
        return f"You focus on {FORMAT_HIGHLIGHT}{resource.name}{FORMAT_RESET}. The known runes begin to glow..."
    return f"You focus on {FORMAT_HIGHLIGHT}{resource.name}{FORMAT_RESET}. Arrange {len(resource.required_combination)} runes to draw it out."


def _element_command(args: List[str], context: Dict[str, Any], append: bool) -> str:
    controller: GatherSessionController = context["controller"]
    journal: Journal = context["journal"]
    if not args: return f"{FORMAT_ERROR}Which element?{FORMAT_RESET}"

    name = " ".join(args)
    element = controller.catalog.find_element(name)
    element_id = element.element_id if element else name

    before = journal.written_count
    accepted = controller.add_element(element_id) if append else controller.toggle_element(element_id)
    if not accepted:
        return _feedback(journal, before, f"{FORMAT_ERROR}Nothing happens.{FORMAT_RESET}")

    names = ", ".join(controller.catalog.element_names(controller.session.selected_elements)) or "nothing"
    if controller.session.running:
        return f"{FORMAT_SUCCESS}The matrix resonates!{FORMAT_RESET} Gathering has begun. (Runes: {names})"
    return f"Runes in place: {names}"


@command("rune", ["element", "toggle"], "gathering",
         "Place an element in the matrix, or take it out if it is already there.\nUsage: rune <element>")
def rune_handler(args: List[str], context: Dict[str, Any]) -> str:
    return _element_command(args, context, append=False)


@command("add", ["place"], "gathering",
         "Place another copy of an element, for combinations that repeat one.\nUsage: add <element>")
def add_handler(args: List[str], context: Dict[str, Any]) -> str:
    return _element_command(args, context, append=True)


@command("clear", ["reset"], "gathering", "Take every element out of the matrix.\nUsage: clear")
def clear_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    journal: Journal = context["journal"]
    before = journal.written_count
    if controller.clear_elements():
        return "The matrix goes dark."
    return _feedback(journal, before, f"{FORMAT_ERROR}There is nothing to clear.{FORMAT_RESET}")


@command("mark", ["auto add", "unmark"], "auto",
         "Add a discovered resource to the auto-gathering list (max 3), or remove it.\n"
         "Resources are gathered in the order they were marked.\nUsage: mark <resource>")
def mark_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    journal: Journal = context["journal"]
    if not args: return f"{FORMAT_ERROR}Mark which resource?{FORMAT_RESET}"

    name = " ".join(args)
    resource = controller.catalog.find_resource(name)
    if resource is None:
        return f"{FORMAT_ERROR}There is no '{name}' here.{FORMAT_RESET}"

    before = journal.written_count
    if not controller.toggle_auto_gather_membership(resource.resource_id):
        return _feedback(journal, before, f"{FORMAT_ERROR}You cannot mark {resource.name}.{FORMAT_RESET}")
    if controller.auto_gather.is_member(resource.resource_id):
        return f"{resource.name} added to auto-gathering."
    return f"{resource.name} removed from auto-gathering."


@command("autogather", ["auto", "ag"], "auto", "Start auto-gathering the marked resources, or stop it.\nUsage: autogather")
def autogather_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    journal: Journal = context["journal"]
    before = journal.written_count
    controller.start_or_stop_auto_gather()
    return _feedback(journal, before, "Nothing changes.")


@command("status", ["st", "progress"], "info", "Show the current gathering state and auto-gathering stats.\nUsage: status")
def status_handler(args: List[str], context: Dict[str, Any]) -> str:
    controller: GatherSessionController = context["controller"]
    catalog = controller.catalog
    state = controller.get_state()

    lines = [f"{FORMAT_TITLE}Gathering{FORMAT_RESET} ({state['mode']} mode)"]
    target = catalog.get_resource(state["target_resource"]) if state["target_resource"] else None
    if target:
        names = ", ".join(catalog.element_names(state["selected_elements"])) or "none"
        lines.append(f"  {FORMAT_CATEGORY}Target:{FORMAT_RESET} {target.name}")
        lines.append(f"  {FORMAT_CATEGORY}Runes:{FORMAT_RESET} {names}")
        lines.append(f"  {FORMAT_CATEGORY}Progress:{FORMAT_RESET} {_progress_bar(state['progress'])}")
    else:
        lines.append(f"  {FORMAT_GRAY}No resource selected.{FORMAT_RESET}")

    members = [catalog.get_resource(rid) for rid in state["auto_members"]]
    member_names = ", ".join(r.name for r in members if r) or "none"
    lines.append(f"  {FORMAT_CATEGORY}Auto list:{FORMAT_RESET} {member_names}")

    stats = state["stats"]
    if state["mode"] == "auto" or stats["total_gathered"]:
        lines.append(f"  {FORMAT_CATEGORY}Gathered:{FORMAT_RESET} {stats['total_gathered']} "
                     f"({stats['cycles_completed']} cycles)")
        for resource_id, count in stats["per_resource_count"].items():
            resource = catalog.get_resource(resource_id)
            lines.append(f"    {resource.name if resource else resource_id}: {count}")
    return "\n".join(lines)
