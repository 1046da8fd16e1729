"""shellac: declarative, strongly-typed command lines.

Describe an external command as a record, one field per option, and compile
it into the exact argument vector to run::

    from shellac import args, run
    from shellac.coreutils import Find, FindType

    find = Find(dirnames=["."], name="*.py", type=FindType.FILE)
    args(find)   # [".", "-name", "*.py", "-type", "f"]
    run(find)
"""

from shellac.chan import EOF, ChanReader, ChanWriter, close_channel, iter_channel
from shellac.cmd import Cmd, command, run, sudo
from shellac.compiler import args, command_name
from shellac.encoder import FieldFormatError, encode_field
from shellac.fields import BARE, CONCAT, FieldSpec, Pos, ValueKind, arg, command_marker, describe, record

__version__ = "0.1.0"

__all__ = [
    "BARE",
    "CONCAT",
    "EOF",
    "ChanReader",
    "ChanWriter",
    "Cmd",
    "FieldFormatError",
    "FieldSpec",
    "Pos",
    "ValueKind",
    "arg",
    "args",
    "close_channel",
    "command",
    "command_marker",
    "command_name",
    "describe",
    "encode_field",
    "iter_channel",
    "record",
    "run",
    "sudo",
]
