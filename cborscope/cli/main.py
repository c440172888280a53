#!/usr/bin/env python3
"""
cborscope.cli.main
==================

Decode a CBOR buffer into an annotated document tree and inspect it.

Usage
-----
# Hex or base64 on the command line
cborscope decode 83016161a1616bf5
cborscope decode gwFhYaFha/U=

# Raw bytes from a file or stdin
cborscope tree --in tx.cbor
cat tx.cbor | cborscope decode --in -

# Which element owns byte 7?
cborscope locate 83016161a1616bf5 --offset 7

# Flat token stream
cborscope tokens 9f0102ff

Exit codes: 0 ok, 1 decode error, 2 usage error.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from cborscope import logging as clog
from cborscope.builder import token_value
from cborscope.config import get_config
from cborscope.errors import CborScopeError, LimitExceeded, UnsupportedToken
from cborscope.inputs import check_limits, decode_bytes, parse_input
from cborscope.navigate import format_path, node_at, node_span, span_hex
from cborscope.render import build_tree, label_text
from cborscope.tokens import iter_tokens
from cborscope.version import __version__

app = typer.Typer(
    name="cborscope",
    help="Annotated CBOR decoder: every value with its exact byte span.",
    no_args_is_help=True,
    add_completion=False,
)

log = clog.get_logger("cborscope.cli")


class _State:
    def __init__(self) -> None:
        self.json_errors = False


_state = _State()


# ----------------- helpers -----------------

def _read_input(text: Optional[str], in_path: Optional[str]) -> bytes:
    if text is not None and in_path is not None:
        raise typer.BadParameter("give either TEXT or --in, not both")
    if text is not None:
        try:
            data, fmt = parse_input(text)
        except CborScopeError as e:
            raise typer.BadParameter(e.message) from e
        log.debug("parsed text input", extra={"format": fmt, "size": len(data)})
        return data
    if in_path is None:
        raise typer.BadParameter("provide hex/base64 TEXT or --in FILE ('-' for stdin)")
    if in_path == "-":
        return sys.stdin.buffer.read()
    p = Path(in_path)
    if not p.is_file():
        raise typer.BadParameter(f"no such file: {in_path}")
    return p.read_bytes()


def _fail(err: CborScopeError) -> NoReturn:
    log.debug("decode failed", extra={"code": err.code})
    if _state.json_errors:
        typer.echo(json.dumps(err.to_problem(), indent=2), err=True)
    else:
        typer.echo(f"error: {err}", err=True)
    raise typer.Exit(1)


def _decode(data: bytes) -> List[Any]:
    try:
        return decode_bytes(data)
    except CborScopeError as e:
        _fail(e)


# ----------------- CLI -----------------

def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"cborscope {__version__}")
        raise typer.Exit(0)


@app.callback()
def _meta(
    version: bool = typer.Option(
        False, "--version", "-V", help="Print version and exit", is_eager=True, callback=_print_version
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override CBORSCOPE_LOG_LEVEL"),
    json_errors: bool = typer.Option(False, "--json-errors", help="Report errors as JSON problem objects"),
) -> None:
    try:
        cfg = get_config()
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="CBORSCOPE_* environment") from e
    clog.configure(json=cfg.log.format == "json", level=(log_level or cfg.log.level))
    _state.json_errors = json_errors


@app.command("decode")
def decode_cmd(
    text: Optional[str] = typer.Argument(None, help="CBOR as hex (0x ok) or base64"),
    in_path: Optional[str] = typer.Option(None, "--in", "-i", help="Read raw CBOR bytes from file ('-' for stdin)"),
    compact: bool = typer.Option(False, "--compact", help="Single-line JSON"),
) -> None:
    """
    Print the annotated document (one entry per top-level item) as JSON.
    """
    docs = _decode(_read_input(text, in_path))
    try:
        if compact:
            out = json.dumps(docs, separators=(",", ":"), ensure_ascii=False)
        else:
            out = json.dumps(docs, indent=2, ensure_ascii=False)
    except RecursionError:
        _fail(LimitExceeded("document too deeply nested to render as JSON"))
    typer.echo(out)


@app.command("tree")
def tree_cmd(
    text: Optional[str] = typer.Argument(None, help="CBOR as hex (0x ok) or base64"),
    in_path: Optional[str] = typer.Option(None, "--in", "-i", help="Read raw CBOR bytes from file ('-' for stdin)"),
) -> None:
    """
    Print the decoded structure as a labelled tree with byte spans.
    """
    data = _read_input(text, in_path)
    docs = _decode(data)
    Console().print(build_tree(docs, title=f"CBOR ({len(data)} bytes)"))


@app.command("locate")
def locate_cmd(
    text: Optional[str] = typer.Argument(None, help="CBOR as hex (0x ok) or base64"),
    in_path: Optional[str] = typer.Option(None, "--in", "-i", help="Read raw CBOR bytes from file ('-' for stdin)"),
    offset: int = typer.Option(..., "--offset", "-o", min=0, help="Byte offset to look up"),
) -> None:
    """
    Show the deepest element covering a byte offset, its path and its bytes.
    """
    data = _read_input(text, in_path)
    if offset >= len(data):
        raise typer.BadParameter(f"offset {offset} is past the end of a {len(data)}-byte input")
    docs = _decode(data)
    hit = node_at(docs, offset)
    if hit is None:
        typer.echo(f"no element covers byte {offset}")
        raise typer.Exit(1)
    path, node = hit
    span = node_span(node)
    typer.echo(f"path: {format_path(path)}")
    Console().print(label_text(node))
    typer.echo(f"hex: {span_hex(data, span)}")


@app.command("tokens")
def tokens_cmd(
    text: Optional[str] = typer.Argument(None, help="CBOR as hex (0x ok) or base64"),
    in_path: Optional[str] = typer.Option(None, "--in", "-i", help="Read raw CBOR bytes from file ('-' for stdin)"),
) -> None:
    """
    List the flat token stream the decoder consumes.
    """
    data = _read_input(text, in_path)
    try:
        check_limits(data)
        tokens = list(iter_tokens(data))
    except CborScopeError as e:
        _fail(e)

    table = Table(title="Tokens")
    table.add_column("Offset", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Kind")
    table.add_column("Value", overflow="fold")
    for tok in tokens:
        if tok.is_opener:
            shown = "" if tok.value is None else str(tok.value)
        else:
            try:
                shown = json.dumps(token_value(tok), ensure_ascii=False)
            except UnsupportedToken:
                shown = ""
        table.add_row(str(tok.span.offset), str(tok.span.length), tok.kind.value, shown)
    Console().print(table)


def main() -> int:
    app()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
