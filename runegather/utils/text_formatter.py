# runegather/utils/text_formatter.py
import re
from typing import Dict, Optional, Tuple

from runegather.config import DEFAULT_COLORS, FORMAT_RESET

TAG_PATTERN = re.compile(r'(\[\[.*?\]\])')
ANSI_RESET = "\033[0m"


def strip_format_codes(text: str) -> str:
    return TAG_PATTERN.sub("", text)


class ConsoleFormatter:
    """Turns [[TAG]] formatting codes into 24-bit ANSI colour escapes (or strips them)."""

    def __init__(self, colors: Optional[Dict[str, Tuple[int, int, int]]] = None, use_color: bool = True):
        self.colors = DEFAULT_COLORS.copy()
        if colors: self.colors.update(colors)
        self.use_color = use_color

    def format(self, text: str) -> str:
        if not self.use_color:
            return strip_format_codes(text)

        def replace(match: 're.Match') -> str:
            tag = match.group(1)
            if tag == FORMAT_RESET:
                return ANSI_RESET
            rgb = self.colors.get(tag)
            if rgb is None:
                return ""  # Unknown tags never leak into the output
            r, g, b = rgb
            return f"\033[38;2;{r};{g};{b}m"

        return TAG_PATTERN.sub(replace, text) + (ANSI_RESET if TAG_PATTERN.search(text) else "")
