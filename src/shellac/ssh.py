"""ssh.py – Command record for OpenSSH's ssh(1) client."""

from __future__ import annotations

from shellac.fields import BARE, Pos, arg, record


class SSHOptions(dict):
    """Options as written in ssh_config(5), rendered as ``-o key=value`` pairs.

    Pairs are sorted by key so the rendering is deterministic.
    """

    def __str__(self) -> str:
        pairs = [f"-o {key}={value}" for key, value in sorted(self.items())]
        return " ".join(pairs)


@record
class SSH:
    """ssh(1)."""

    sshv1: bool = arg("-1")
    sshv2: bool = arg("-2")
    ipv4: bool = arg("-4")
    ipv6: bool = arg("-6")
    agent_forwarding: bool = arg("-A")
    no_agent_forwarding: bool = arg("-a")
    bind_address: str = arg("-b")
    compression: bool = arg("-C")
    cipher_spec: str = arg("-c")
    # [<bind_address>:]<port>
    dynamic_forward: str = arg("-D")
    escape_char: str = arg("-e")
    config_file: str = arg("-F")
    background: bool = arg("-f")
    allow_remote_connections_to_local_forwarded_ports: bool = arg("-g")
    pkcs11: str = arg("-I")
    identity: str = arg("-i")
    gssapi: bool = arg("-K")
    no_gssapi: bool = arg("-k")
    # [<bind_address>:]<port>:<host>:<hostport>
    local_forward: str = arg("-L")
    login: str = arg("-l")
    master: bool = arg("-M")
    mac_spec: str = arg("-m")
    no_remote_command: bool = arg("-N")
    no_read_stdin: bool = arg("-n")
    control_command: str = arg("-O")
    options: SSHOptions = arg(BARE)
    port: int = arg("-p")
    quiet: bool = arg("-q")
    # [<bind_address>:]<port>:<host>:<hostport>
    remote_forward: str = arg("-R")
    control_path: str = arg("-S")
    subsystem: bool = arg("-s")
    no_tty: bool = arg("-T")
    tty: bool = arg("-t")
    verbose: bool = arg("-v")
    verbose1: bool = arg("-v")
    verbose2: bool = arg("-vv")
    verbose3: bool = arg("-vvv")
    # <host>:<port>
    forward_stdin_stdout: str = arg("-W")
    # <local_tun>:<remote_tun>
    tunnel: str = arg("-w")
    x11: bool = arg("-X")
    no_x11: bool = arg("-x")
    trusted_x11: bool = arg("-Y")
    syslog: bool = arg("-y")

    # [<username>@]<hostname>
    hostname: str = arg(pos=Pos.LAST)
    # <command>
    command: list[str] | None = arg(pos=Pos.LAST)
