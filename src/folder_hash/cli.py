"""CLI for Folder Hash."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text
from rich.tree import Tree

from . import __version__
from .api import hash_element
from .config import apply_env_overrides, get_options_path, load_options, resolve_options
from .digest import ENCODERS
from .errors import FolderHashError
from .merkle import HashResult

console = Console()
error_console = Console(stderr=True)


def build_rich_tree(result: HashResult) -> Tree:
    """Convert a HashResult into a rich Tree for display."""
    tree = Tree(_label(result))
    _add_children(tree, result)
    return tree


def _label(node: HashResult) -> Text:
    style = "bold blue" if node.is_directory else "bold"
    return Text.assemble((node.name, style), " ", (node.hash, "dim"))


def _add_children(tree: Tree, node: HashResult) -> None:
    for child in node.children or ():
        branch = tree.add(_label(child))
        _add_children(branch, child)


@click.command()
@click.version_option(version=__version__, prog_name="folder-hash")
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--folder",
    type=click.Path(path_type=Path),
    default=None,
    help="Parent folder; PATH is then an entry name inside it",
)
@click.option("--algo", default=None, help="Hash algorithm (default: sha1)")
@click.option(
    "--encoding",
    type=click.Choice(sorted(ENCODERS)),
    default=None,
    help="Digest encoding (default: hex)",
)
@click.option("--exclude", "-e", "excludes", multiple=True, help="Glob pattern to exclude (repeatable)")
@click.option("--no-match-basename", is_flag=True, help="Leave child names out of directory hashes")
@click.option("--no-match-path", is_flag=True, help="Leave the root's own name out of its hash")
@click.option("--no-follow-symlinks", is_flag=True, help="Skip symbolic links")
@click.option("--skip-empty-folders", is_flag=True, help="Omit directories with no included entries")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="JSON options file (default: .folder-hash.json in the current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full hash tree as JSON")
@click.option("--tree", "as_tree", is_flag=True, help="Print the full hash tree")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(
    path: Path,
    folder: Path | None,
    algo: str | None,
    encoding: str | None,
    excludes: tuple[str, ...],
    no_match_basename: bool,
    no_match_path: bool,
    no_follow_symlinks: bool,
    skip_empty_folders: bool,
    config_path: Path | None,
    as_json: bool,
    as_tree: bool,
    verbose: bool,
) -> None:
    """Folder Hash - Compute a deterministic hash of a file or directory tree."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=error_console, show_path=False)],
        )

    try:
        options = load_options(config_path or get_options_path(Path.cwd()))
        options = apply_env_overrides(options)

        data = options.model_dump()
        if algo:
            data["algo"] = algo
        if encoding:
            data["encoding"] = encoding
        if excludes:
            data["excludes"] = [*data["excludes"], *excludes]
        if no_match_basename:
            data["match"]["basename"] = False
        if no_match_path:
            data["match"]["path"] = False
        if no_follow_symlinks:
            data["symlinks"]["follow"] = False
        if skip_empty_folders:
            data["folders"]["include_empty"] = False
        options = resolve_options(data)

        if folder is not None:
            result = hash_element(str(path), str(folder), options)
        else:
            result = hash_element(str(path), options)
    except FolderHashError as e:
        error_console.print(Text.assemble(("Error:", "red"), f" {e}"))
        sys.exit(1)

    if as_json:
        click.echo(result.to_json())
    elif as_tree:
        console.print(build_rich_tree(result))
    else:
        click.echo(result.hash)


if __name__ == "__main__":
    main()
