"""Jamba Quickstart command line entry point.

Fetches (or reads) a blank plugin template, resolves it against the values
given on the command line and writes ``<name>-src.zip``.

Usage::

    jamba-quickstart --jamba-version v6.0.0 --set name=MyPlugin --set company=Acme
    jamba-quickstart --template blank-plugin.zip --values plugin.yaml -o ./out
    jamba-quickstart --template blank-plugin.zip --set name=MyPlugin --list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.table import Table

from jamba_quickstart.config import Config
from jamba_quickstart.errors import QuickstartError
from jamba_quickstart.fetcher import HttpTemplateFetcher, LocalTemplateFetcher, TemplateCache
from jamba_quickstart.scaffolder import (
    ArchiveLoader,
    ArchiveWriter,
    ConfigurationResolver,
    PluginScaffoldEngine,
)
from jamba_quickstart.scaffolder.models import FileTree
from jamba_quickstart.utils import (
    console,
    create_progress,
    format_size,
    load_values,
    parse_assignments,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

LOCAL_VERSION = "local"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jamba-quickstart",
        description="Jamba Quickstart -- generate a blank audio plugin project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  jamba-quickstart --jamba-version v6.0.0 --set name=MyPlugin\n"
            "  jamba-quickstart --template plugin.zip --values plugin.yaml -o ./out\n"
            "  jamba-quickstart --template plugin.zip --set name=MyPlugin --list\n"
        ),
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--jamba-version",
        help="Template version to download (e.g. v6.0.0)",
    )
    source.add_argument(
        "--template",
        help="Path to a template zip on disk instead of downloading one",
    )
    parser.add_argument(
        "--git-hash",
        default=None,
        help="Value of the jamba_git_hash token (defaults to the template version)",
    )
    parser.add_argument(
        "--download-url-hash",
        default=None,
        help="Value of the jamba_download_url_hash token",
    )
    parser.add_argument(
        "--values",
        default=None,
        help="JSON or YAML file with plugin values (name, company, namespace, ...)",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a single value; overrides --values (repeatable)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory where the archive is written (default: config output_dir)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the resolved file tree instead of writing the archive",
    )
    return parser


def _collect_values(args: argparse.Namespace) -> dict[str, str]:
    values: dict[str, str] = {}
    if args.values:
        values.update(load_values(args.values))
    values.update(parse_assignments(args.assignments))
    return values


def _print_tree(tree: FileTree) -> None:
    table = Table(title="Resolved files", show_header=True, header_style="bold cyan")
    table.add_column("Path")
    table.add_column("Kind", style="dim")
    table.add_column("Size", justify="right")
    table.add_column("Mode", style="dim")
    for path, entry in tree.items():
        mode = oct(entry.unix_permissions) if entry.unix_permissions is not None else "-"
        table.add_row(path, "binary" if entry.is_binary else "text", format_size(entry.size), mode)
    console.print(table)


async def run(args: argparse.Namespace, config: Config) -> Path | None:
    """Execute one CLI invocation; returns the written archive path, if any."""
    values = _collect_values(args)

    if args.template:
        version = LOCAL_VERSION
        fetcher = LocalTemplateFetcher(args.template)
        if not args.git_hash:
            print_warning(f"No --git-hash given; jamba_git_hash is set to '{LOCAL_VERSION}'")
    else:
        version = args.jamba_version
        fetcher = HttpTemplateFetcher(
            config.template.base_url,
            filename_pattern=config.template.filename_pattern,
            timeout=config.template.timeout,
        )

    loader = ArchiveLoader(
        root_marker=config.template.root_marker,
        excluded_dirs=config.template.excluded_dirs,
        excluded_files=config.template.excluded_files,
    )
    cache = TemplateCache(fetcher, loader)

    with create_progress() as progress:
        progress.add_task(f"Loading template {version}...", total=None)
        template = await cache.get(version)

    resolver = ConfigurationResolver(
        jamba_git_hash=args.git_hash or version,
        jamba_download_url_hash=args.download_url_hash,
    )
    engine = PluginScaffoldEngine(
        resolver,
        ArchiveWriter(
            compression=config.archive.compression,
            default_file_permissions=config.archive.default_file_permissions,
            default_dir_permissions=config.archive.default_dir_permissions,
        ),
        root_suffix=config.archive.root_suffix,
    )

    if args.list:
        tokens, resolved = engine.resolve_tree(template, values)
        _print_tree(resolved)
        print_summary_table(
            {"Plugin": tokens.plugin_name, "Target": tokens["target"], "Files": str(len(resolved))},
            title="Plugin",
        )
        return None

    archive = await engine.generate(template, values)
    output_dir = Path(args.output) if args.output else config.output_dir
    target = await asyncio.to_thread(archive.save, output_dir)
    print_summary_table(
        {
            "Template": version,
            "Files": str(cache.file_count(version)),
            "Archive": str(target),
            "Size": format_size(len(archive.content)),
        },
        title="Plugin archive",
    )
    return target


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``jamba-quickstart`` / ``python -m jamba_quickstart.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = Config.from_env()
        target = asyncio.run(run(args, config))
    except (QuickstartError, OSError, ValueError) as exc:
        print_error(f"Error: {exc}")
        return 1

    if target is not None:
        print_success(f"Plugin generated: {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
