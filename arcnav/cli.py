"""Command-line front door for arcnav.

Parses CLI options, merges them with the persisted config, and owns the
node cache, notice board, adapters and navigation service for the run.
Walks an optional name path non-interactively and prints the columns.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from . import config
from .adapters import DEFAULT_TIMEOUT_SECONDS, ArcgisAdapters, DataAdapters
from .errors import ArcnavError
from .inspector import inspector_text
from .keymap import KeyComboRegistry, miller_registry
from .navigation import NavigationService
from .node_cache import NodeCache, Scope
from .notices import NoticeBoard, NoticeLevel

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def build_adapters(
    *,
    server_url: str | None,
    portal_url: str | None,
    token: str | None,
    timeout: float,
) -> ArcgisAdapters:
    return ArcgisAdapters(
        server_host=server_url,
        portal_host=portal_url,
        token=token,
        timeout=timeout,
    )


def _find_by_name(service: NavigationService, name: str) -> str | None:
    """Return the id of the first visible node in the active column named ``name``."""
    wanted = name.casefold()
    for node in service.filtered_nodes():
        if node.name.casefold() == wanted:
            return node.id
    return None


async def replay_keys(service: NavigationService, registry: KeyComboRegistry, keys: list[str]) -> int:
    """Dispatch each key token in order; return how many were handled.

    A token with no active binding raises a warning notice and the replay
    continues with the next one.
    """
    handled = 0
    for key in keys:
        if await registry.dispatch(key):
            handled += 1
        else:
            service.notices.push_notice(NoticeLevel.WARN, f"Key {key!r} did nothing here")
    return handled


def render_key_help(registry: KeyComboRegistry) -> str:
    rows = registry.help_rows()
    width = max((len(keys) for keys, _description in rows), default=0)
    return "keys:\n" + "".join(f"  {keys.ljust(width)}  {description}\n" for keys, description in rows)


def _split_keys(value: str) -> list[str]:
    """argparse type for a comma-separated key token list."""
    keys = [token.strip() for token in value.split(",") if token.strip()]
    if not keys:
        raise argparse.ArgumentTypeError("expected at least one key token")
    return keys


def render_notices(notices: NoticeBoard) -> str:
    return "".join(f"[{notice.level.value}] {notice.text}\n" for notice in notices.notices())


async def walk_names(service: NavigationService, names: list[str]) -> bool:
    """Enter each named entry in turn, stopping with a warning at the first miss."""
    for depth, name in enumerate(names):
        node_id = _find_by_name(service, name)
        if node_id is None or not service.select_node(node_id):
            service.notices.push_notice(NoticeLevel.WARN, f"No entry named {name!r} at depth {depth}")
            return False
        await service.enter()
    return True


def render_columns(service: NavigationService) -> str:
    """Plain-text dump of the non-empty columns, active one starred."""
    state = service.state
    lines = [f"scope: {state.scope.value}"]
    crumbs = service.breadcrumb()
    if crumbs:
        lines.append("path: " + " > ".join(crumbs))
    for index, column in enumerate(state.columns):
        if not column.nodes and column.error is None and not column.loading:
            continue
        parent = service.cache.get_node(column.parent_id) if column.parent_id is not None else None
        title = parent.name if parent is not None else f"{state.scope.value} root"
        marker = "*" if index == state.active_column else " "
        header = f"{marker}[{index}] {title}"
        if column.filter:
            header += f"  filter={column.filter!r}"
        if column.loading:
            header += "  (loading)"
        lines.append(header)
        if column.error is not None:
            lines.append(f"    error: {column.error}")
            continue
        visible = service.filtered_nodes(index)
        for row, node in enumerate(visible):
            pointer = ">" if row == column.selected_index else " "
            lines.append(f"  {pointer} {node.name}  [{node.kind.value}]")
    return "\n".join(lines) + "\n"


async def run_browse(
    adapters: DataAdapters,
    scope: Scope,
    *,
    names: list[str],
    keys: list[str] | None = None,
    filter_text: str | None = None,
    inspect: bool = False,
    help_keys: bool = False,
    style: str = "monokai",
    no_color: bool = False,
) -> str:
    """Load ``scope``, walk ``names``, replay ``keys``, and return printable output.

    The inspector block is printed for ``inspect`` or when a replayed key
    toggled the inspector on.
    """
    cache = NodeCache()
    notices = NoticeBoard()
    service = NavigationService(cache, adapters, notices, scope=scope)

    await service.set_scope(scope)
    root_error = service.state.columns[0].error
    if root_error is not None:
        raise ArcnavError(f"Failed to load {scope.value} root: {root_error}")

    registry = miller_registry(service)
    await walk_names(service, names)
    if keys:
        await replay_keys(service, registry, keys)
    if filter_text:
        service.set_filter(filter_text)

    out = render_columns(service) + render_notices(notices)
    if help_keys:
        out += "\n" + render_key_help(registry)
    if inspect or service.state.inspector_visible:
        node = service.selected_node()
        if node is not None:
            out += "\n" + inspector_text(node, style=style, no_color=no_color)
    return out


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print one non-interactive browse of the resource tree."""
    parser = argparse.ArgumentParser(
        description="Browse ArcGIS Server and Portal resources as Miller columns."
    )
    parser.add_argument("--scope", choices=[scope.value for scope in Scope], default=None, help="Root namespace.")
    parser.add_argument("--server-url", default=None, help="ArcGIS Server host (.../arcgis or .../rest/services).")
    parser.add_argument("--portal-url", default=None, help="Portal host (.../portal or .../sharing/rest).")
    parser.add_argument("--token", default=None, help="Access token appended to every request.")
    parser.add_argument("--path", nargs="*", default=[], metavar="NAME", help="Names to enter, outermost first.")
    parser.add_argument("--filter", default=None, help="Filter applied to the final active column.")
    parser.add_argument(
        "--keys",
        type=_split_keys,
        default=None,
        metavar="KEY,...",
        help="Comma-separated keys replayed after --path, e.g. j,j,l.",
    )
    parser.add_argument("--help-keys", action="store_true", help="Append the key binding reference.")
    parser.add_argument("--inspect", action="store_true", help="Print the selected node's details.")
    parser.add_argument("--style", default=None, help="Pygments style name for --inspect.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Request timeout in seconds.")
    parser.add_argument("--save", action="store_true", help="Persist --scope/--server-url/--portal-url.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug).")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    scope = Scope(args.scope) if args.scope is not None else config.load_scope()
    server_url = args.server_url or config.load_server_url()
    portal_url = args.portal_url or config.load_portal_url()
    timeout = args.timeout if args.timeout is not None else (config.load_timeout_seconds() or DEFAULT_TIMEOUT_SECONDS)
    style = args.style or config.load_style_name()

    if args.save:
        if args.server_url:
            config.save_server_url(args.server_url)
        if args.portal_url:
            config.save_portal_url(args.portal_url)
        if args.scope is not None:
            config.save_scope(scope)

    host = server_url if scope is Scope.SERVER else portal_url
    if not host:
        raise SystemExit(f"No {scope.value} host configured; pass --{scope.value}-url.")
    logger.info("browsing %s scope at %s", scope.value, host)

    adapters = build_adapters(server_url=server_url, portal_url=portal_url, token=args.token, timeout=timeout)

    async def _run() -> str:
        async with adapters:
            return await run_browse(
                adapters,
                scope,
                names=list(args.path),
                keys=args.keys,
                help_keys=args.help_keys,
                filter_text=args.filter,
                inspect=args.inspect,
                style=style,
                no_color=args.no_color,
            )

    try:
        output = asyncio.run(_run())
    except ArcnavError as exc:
        raise SystemExit(str(exc)) from exc
    sys.stdout.write(output)


if __name__ == "__main__":
    main()
