"""coreutils.py – Command records for GNU findutils/coreutils programs.

Only ``find(1)`` is described so far.  There is no support for the complex
logical expressions (``-o``, ``!``, parentheses) that ``find`` accepts; build
such invocations by hand.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from shellac.fields import Pos, arg, record


class FindType(Enum):
    """Values of find(1)'s ``-type`` and ``-xtype`` tests."""

    BLOCK = "b"
    CHARACTER = "c"
    DIRECTORY = "d"
    PIPE = "p"
    FILE = "f"
    LINK = "l"
    SOCKET = "s"
    DOOR = "D"


class FindNMode(Enum):
    """Comparison qualifier of a numeric find(1) argument."""

    EXACT = ""
    GREATER_THAN = "+"
    LESS_THAN = "-"


_FIND_N_RE = re.compile(r"^([+-]?)(\d+)$")


@dataclass(frozen=True)
class FindN:
    """A numeric find(1) argument: ``n``, ``+n`` or ``-n``."""

    mode: FindNMode
    n: int

    def __str__(self) -> str:
        return f"{self.mode.value}{self.n}"

    @classmethod
    def parse(cls, text: str) -> FindN:
        m = _FIND_N_RE.match(text.strip())
        if m is None:
            raise ValueError(f"invalid find number {text!r}, expected n, +n or -n")
        return cls(FindNMode(m.group(1)), int(m.group(2)))


class FindExecMode(Enum):
    """Terminator of ``-exec``-style actions."""

    ONE = ";"
    MANY = "+"


def find_exec(mode: FindExecMode, *command: str) -> list[str]:
    """Build the argument list of ``-exec``, ``-execdir``, ``-ok`` or ``-okdir``."""
    return [*command, mode.value]


@record
class Find:
    """find(1).

    The three symbolic-link modes are mutually exclusive in practice: find
    honours the last one given, and their order here is fixed.  ``-follow``
    is not supported because it is positional among the tests.
    """

    # -P, -L, -H
    do_not_follow_symlinks: bool = arg("-P", pos=Pos.FIRST)
    follow_symlinks: bool = arg("-L", pos=Pos.FIRST)
    follow_initial_symlinks: bool = arg("-H", pos=Pos.FIRST)

    # -D <debugoptions>
    debug_options: str = arg("-D", pos=Pos.FIRST)

    # -O<level>
    optimization: int = arg("-O", pos=Pos.FIRST, sep="-")

    # Starting points of the traversal.
    dirnames: list[str] | None = arg(pos=Pos.FIRST)

    # -- options --
    day_start: bool = arg("-daystart")
    depth_first: bool = arg("-depth")
    ignore_readdir_race: bool = arg("-ignore_readdir_race")
    max_depth: int | None = arg("-maxdepth")
    min_depth: int | None = arg("-mindepth")
    no_leaf: bool = arg("-noleaf")
    regex_type: str = arg("-regextype")
    warn: bool = arg("-warn")
    xdev: bool = arg("-xdev")

    # -- tests --
    accessed_minutes_ago: FindN | None = arg("-amin")
    accessed_since_file: str = arg("-anewer")
    accessed_days_ago: FindN | None = arg("-atime")
    changed_minutes_ago: FindN | None = arg("-cmin")
    changed_since_file: str = arg("-cnewer")
    changed_days_ago: FindN | None = arg("-ctime")
    empty: bool = arg("-empty")
    executable: bool = arg("-executable")
    false: bool = arg("-false")
    filesystem_type: str = arg("-fstype")
    gid: FindN | None = arg("-gid")
    group: str = arg("-group")
    symlink_target_case_insensitive: str = arg("-ilname")
    name_case_insensitive: str = arg("-iname")
    inode: FindN | None = arg("-inum")
    regex_case_insensitive: str = arg("-iregex")
    wholename_case_insensitive: str = arg("-iwholename")
    links: FindN | None = arg("-links")
    link_name: str = arg("-lname")
    modified_minutes_ago: FindN | None = arg("-mmin")
    modified_days_ago: FindN | None = arg("-mtime")
    name: str = arg("-name")
    modified_since_file: str = arg("-newer")
    newer: str = arg("-newer")
    unnamed_group: bool = arg("-nogroup")
    unnamed_user: bool = arg("-nouser")
    path: str = arg("-path")
    mode: int | None = arg("-perm", format="{:o}")
    mode_mask_all: int | None = arg("-perm", format="-{:o}")
    mode_mask_any: int | None = arg("-perm", format="/{:o}")
    readable: bool = arg("-readable")
    regex: str = arg("-regex")
    same_file: str = arg("-samefile")
    # Byte sizes only.
    size: FindN | None = arg("-size", format="{}c")
    true: bool = arg("-true")
    type: FindType | None = arg("-type")
    uid: FindN | None = arg("-uid")
    used: FindN | None = arg("-used")
    user: str = arg("-user")
    writable: bool = arg("-writable")
    xtype: FindType | None = arg("-xtype")

    # -- actions --
    delete: bool = arg("-delete", pos=Pos.LAST)
    exec: list[str] | None = arg("-exec", pos=Pos.LAST)
    exec_dir: list[str] | None = arg("-execdir", pos=Pos.LAST)
    fls: str = arg("-fls", pos=Pos.LAST)
    fprint: str = arg("-fprint", pos=Pos.LAST)
    fprint0: str = arg("-fprint0", pos=Pos.LAST)
    # -fprintf <file> <format>
    fprintf: tuple[str, str] | None = arg("-fprintf", pos=Pos.LAST)
    ls: bool = arg("-ls", pos=Pos.LAST)
    ok: list[str] | None = arg("-ok", pos=Pos.LAST)
    ok_dir: list[str] | None = arg("-okdir", pos=Pos.LAST)
    print: bool = arg("-print", pos=Pos.LAST)
    print0: bool = arg("-print0", pos=Pos.LAST)
    printf: str = arg("-printf", pos=Pos.LAST)
    prune: bool = arg("-prune", pos=Pos.LAST)
    quit: bool = arg("-quit", pos=Pos.LAST)
