"""
Server menu rendering
"""

from typing import Iterable, Mapping, Optional

from colorama import Fore, Style

from .config import ServerDefinition
from .utils.display_width import pad_str

MENU_TITLE = "Choose one server from below as the target:"

# Column widths in terminal cells
KEY_WIDTH = 6
NAME_WIDTH = 46
ADDRESS_WIDTH = 21


def _bold(text: str, color: str = "") -> str:
    return f"{color}{Style.BRIGHT}{text}{Style.RESET_ALL}"


def format_comment(comment: str) -> str:
    """Wrap a non-empty comment in parentheses"""
    if not comment:
        return ""
    return f"({comment})"


def format_row(server: ServerDefinition, env: Optional[Mapping[str, str]] = None) -> str:
    """
    Render one menu line for a server.

    Columns are padded before colouring so that alignment only depends on
    the visible text. Placeholders that cannot be resolved are shown as-is.
    """
    key_col = pad_str(server.key, KEY_WIDTH)
    name_col = pad_str(server.name, NAME_WIDTH)
    addr_col = pad_str(server.address(env), ADDRESS_WIDTH)
    comment = format_comment(server.comment)

    return " ".join([
        key_col,
        _bold(name_col, Fore.YELLOW),
        _bold(addr_col, Fore.GREEN),
        _bold(comment, Fore.BLUE),
    ])


def show_menu(servers: Iterable[ServerDefinition], env: Optional[Mapping[str, str]] = None) -> None:
    """Print the server list as an aligned table"""
    print(_bold(MENU_TITLE))
    print()

    for server in servers:
        print(format_row(server, env))

    print()
