from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Callable


@dataclass(frozen=True)
class NavBarItem:
    name: str
    link: str = ""
    bold: bool = False
    nav_bar_append_slash: bool = False

    def html(self) -> str:
        name = escape(self.name)
        if self.link:
            link = self.link + ("/" if self.nav_bar_append_slash else "")
            return f'<a class="nav-link" href="{escape(link)}">{name}</a>'
        if self.bold:
            return f'<span class="navbar-text fw-semibold me-2">{name}</span>'
        return f'<span class="navbar-text me-2">{name}</span>'


NavBarGenerator = Callable[[Any], NavBarItem]
