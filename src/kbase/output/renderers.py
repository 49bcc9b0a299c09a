"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. Note content
(``read``) bypasses Rich entirely so tabs and brackets reach the
terminal untouched.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from kbase.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from kbase.services.result import ServiceResult

# Minimum width of the line-number gutter, as in ``cat -n``.
_MIN_GUTTER = 6

# Keys tried, in order, when --quiet reduces an item to one token.
_QUIET_KEYS = ("tag", "name", "path")


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    if result.ok and result.op == "read":
        return render_note(result.data)

    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "read":
        return render_note(result.data)

    if result.op == "links":
        paths: list[str] = []
        for direction in ("forward", "backward"):
            section = result.data.get(direction)
            if section:
                paths.extend(section.get("links", []))
        return "\n".join(paths)

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(key for key in (_extract_key(item) for item in items) if key)

    return f"OK: {result.op}"


def render_note(data: dict[str, Any]) -> str:
    """Plain-text note body or heading outline, optionally line-numbered."""
    line_numbers = bool(data.get("line_numbers"))
    width = max(_MIN_GUTTER, len(str(data.get("line_count", 0))))

    if data.get("outline"):
        lines: list[str] = []
        for heading in data.get("headings", []):
            level = int(heading["level"])
            text = f"{'  ' * (level - 1)}{'#' * level} {heading['text']}"
            lines.append(_numbered(heading["line"], text, width) if line_numbers else text)
        return "\n".join(lines)

    content = str(data.get("content", ""))
    if not line_numbers:
        return content.rstrip("\n")
    return "\n".join(
        _numbered(lineno, line, width) for lineno, line in enumerate(content.splitlines(), 1)
    )


# ── Helpers ───────────────────────────────────────────────────────────


def _numbered(lineno: int, text: str, width: int) -> str:
    return f"{lineno:>{width}}\t{text}"


def _extract_key(item: Any) -> str:
    """Extract the identifying key from a dict item (tag, name, or path)."""
    if isinstance(item, dict):
        for key in _QUIET_KEYS:
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="kb.ok")
    op = Text(f"  {result.op}", style="kb.op")
    console.print(label, op, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="kb.key")
    if key.endswith("path") or key.endswith("dir") or key.endswith("file"):
        v = Text(str(value), style="kb.path")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block; the ``-v`` timing report gets its own layout."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "timing":
            _render_timing(console, v)
        else:
            console.print(Text(f"    {k}: {v}"))


def _timing_style(elapsed_ms: float) -> str:
    if elapsed_ms > 1000:
        return "bold red"
    if elapsed_ms > 100:
        return "yellow"
    return "dim"


def _render_timing(console: Console, timing: dict[str, Any]) -> None:
    """Operation total first, then one indented line per stage with its counts."""
    rows: list[tuple[int, str, float, dict[str, Any]]] = [
        (4, timing.get("operation", "?"), timing.get("elapsed_ms", 0.0), {}),
    ]
    for step in timing.get("stages", []):
        rows.append((8, step["name"], step["elapsed_ms"], step.get("counts") or {}))

    for indent, name, elapsed, counts in rows:
        line = Text(" " * indent)
        line.append(f"{elapsed:>8.2f}ms", style=_timing_style(elapsed))
        line.append(f"  {name}")
        if counts:
            line.append("  (" + ", ".join(f"{key}={value}" for key, value in counts.items()) + ")")
        console.print(line)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="kb.error")
    op = Text(f"  {result.op}", style="kb.op")
    console.print(label, op, Text(" — "), Text(msg), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Index renderer ────────────────────────────────────────────────────


def _render_index(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the outcome of ``kbase index``."""
    d = result.data
    _status_line(console, result)
    _field(console, "vault", d.get("vault", ""))
    _field(console, "documents", d.get("documents", 0))

    tags = d.get("tags")
    if tags:
        console.print()
        console.print(Text(f"Built tag index: {_plural(tags['count'], 'unique tag')}"))
        _field(console, "path", tags["path"])

    links = d.get("links")
    if links:
        console.print()
        console.print(Text(f"Built link index: {_plural(links['count'], 'link')}"))
        _field(console, "forward_path", links["forward_path"])
        _field(console, "backward_path", links["backward_path"])
        if links.get("unresolved"):
            console.print(
                Text(f"  {links['unresolved']} unresolved links (broken)", style="kb.warning")
            )

    if verbose:
        _render_meta(console, result)


# ── Tag renderers ─────────────────────────────────────────────────────


def _render_tags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render tag listings as ``tag (n notes)`` lines."""
    items = result.data.get("items", [])
    if not items:
        console.print("No tags found.")
    for item in items:
        line = Text(item["tag"], style="kb.tag")
        line.append(f" ({_plural(item['count'], 'note')})", style="kb.count")
        console.print(line)
    if verbose:
        _render_meta(console, result)


def _render_tagged_notes(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render the notes carrying one tag."""
    d = result.data
    items = d.get("items", [])
    if not items:
        scope = f" in domain '{d['domain']}'" if d.get("domain") else ""
        console.print(Text(f"No notes with tag '{d.get('tag', '')}'{scope}."))
    for item in items:
        console.print(Text(item["path"], style="kb.path"))
    if verbose:
        _render_meta(console, result)


# ── Link renderer ─────────────────────────────────────────────────────


def _render_links(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render forward and backward link sections for one note."""
    d = result.data
    note = d.get("note", "")
    if not d.get("indexed"):
        console.print(Text(f"No links found for {note}"))
        if verbose:
            _render_meta(console, result)
        return

    console.print(Text(f"Links for {note}", style="kb.title"))
    for direction, label in (("forward", "Forward links"), ("backward", "Backward links")):
        section = d.get(direction)
        if section is None:
            continue
        console.print()
        console.print(Text(f"{label} ({section['total']}):"))
        for path in section["links"]:
            console.print(Text(f"  {path}", style="kb.path"))
    if verbose:
        _render_meta(console, result)


# ── Note renderers ────────────────────────────────────────────────────


def _render_domains(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render domains as a table; the description column only when used."""
    items = result.data.get("items", [])
    if not items:
        console.print("No domains found in vault.")
        return

    with_descriptions = any(item.get("description") for item in items)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Domain", style="kb.domain", no_wrap=True)
    table.add_column("Notes", style="kb.count", justify="right")
    if with_descriptions:
        table.add_column("Description")

    for item in items:
        row = [Text(item["name"]), Text(str(item["count"]))]
        if with_descriptions:
            row.append(Text(item.get("description") or ""))
        table.add_row(*row)
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_list_notes(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render notes as a Path/Title table."""
    d = result.data
    items = d.get("items", [])
    if not items:
        domain, tag = d.get("domain"), d.get("tag")
        if domain and tag:
            console.print(Text(f"No notes in domain '{domain}' with tag '{tag}'."))
        elif tag:
            console.print(Text(f"No notes with tag '{tag}'."))
        elif domain:
            console.print(Text(f"No notes in domain '{domain}'."))
        else:
            console.print("No notes found.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="kb.path", no_wrap=True)
    table.add_column("Title", style="kb.title")
    for item in items:
        table.add_row(Text(item["path"]), Text(item["title"]))
    console.print(table)
    console.print(f"\n{_plural(d.get('total', len(items)), 'note')}")
    if verbose:
        _render_meta(console, result)


# ── Config renderers ──────────────────────────────────────────────────


def _vault_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("Vault", style="kb.domain", no_wrap=True)
    table.add_column("Path", style="kb.path")
    for item in items:
        marker = "*" if item.get("active") else ""
        path = item["path"] if item.get("exists") else f"{item['path']} (missing)"
        table.add_row(Text(marker), Text(item["name"]), Text(path))
    return table


def _render_config(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the resolved configuration."""
    d = result.data
    _status_line(console, result)
    _field(console, "config_file", d.get("config_file", ""))
    _field(console, "active_vault", d.get("active_vault") or "(none)")
    vaults = d.get("vaults", [])
    if vaults:
        console.print()
        console.print(_vault_table(vaults))
    if verbose:
        _render_meta(console, result)


def _render_vaults(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render configured vaults, the active one starred."""
    items = result.data.get("items", [])
    if not items:
        console.print("No vaults configured.")
        return
    console.print(_vault_table(items))


def _render_add_vault(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    verb = "Replaced" if d.get("replaced") else "Added"
    console.print(Text(f"{verb} vault '{d['name']}' in config"))
    _field(console, "path", d.get("path", ""))
    if d.get("active"):
        console.print(Text("Set as active vault", style="kb.ok"))


def _render_use_vault(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text(f"Set '{result.data['name']}' as active vault", style="kb.ok"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "index": _render_index,
    "tags": _render_tags,
    "tagged_notes": _render_tagged_notes,
    "links": _render_links,
    "domains": _render_domains,
    "list_notes": _render_list_notes,
    "config": _render_config,
    "vaults": _render_vaults,
    "add_vault": _render_add_vault,
    "use_vault": _render_use_vault,
}
