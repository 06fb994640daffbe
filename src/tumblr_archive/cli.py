"""CLI interface for tumblr-archive.

Commands:
    init    - Write a config file
    blogs   - List the blogs in a TumblThree archive
    posts   - Parse a blog's metadata files and print its posts as JSON
    status  - Show current configuration and archive summary
"""

import sys
from pathlib import Path

import click

from .config import (
    CONFIG_FILE,
    AppConfig,
    config_exists,
    load_config,
    save_config,
)
from .logging_config import setup_logging
from .media import TrimRule

TRIM_CHOICES = [r.value for r in TrimRule]


def _load_or_default(config_path: Path) -> AppConfig:
    if not config_exists(config_path):
        return AppConfig()
    try:
        return load_config(config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """TumblThree Archive — Read downloaded blogs into a uniform post list."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE


@main.command()
@click.pass_context
def init(ctx):
    """Write a config file pointing at your TumblThree blogs directory."""
    config_path = ctx.obj["config_path"]

    click.echo("TumblThree Archive — Setup")
    click.echo("=" * 40)
    click.echo()
    archive_path = click.prompt(
        "TumblThree blogs directory", default=".", type=click.Path(file_okay=False)
    )
    click.echo()
    click.echo("Photo URLs in older text metadata often carry a different size")
    click.echo("suffix than the file on disk (_1280.jpg vs _540.jpg).")
    image_trim = click.prompt(
        "Image match rule",
        default=TrimRule.SIZE_SUFFIX.value,
        type=click.Choice(TRIM_CHOICES),
    )

    config = AppConfig(
        archive_path=Path(archive_path).expanduser(),
        image_trim=TrimRule(image_trim),
    )
    save_config(config, config_path)
    click.echo(f"\nConfig saved to {config_path}")
    click.echo("Run 'tumblr-archive blogs' to list your downloaded blogs.")


@main.command()
@click.argument("root", type=click.Path(), required=False)
@click.pass_context
def blogs(ctx, root):
    """List blogs in ROOT (default: the configured archive path)."""
    from .loader import list_blogs

    config = _load_or_default(ctx.obj["config_path"])
    root_path = Path(root) if root else config.archive_path

    try:
        names = list_blogs(root_path)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not names:
        click.echo(f"No blogs found in {root_path}", err=True)
        return
    for name in names:
        click.echo(name)


@main.command()
@click.argument("blog")
@click.option("-o", "--output", type=click.Path(), default=None, help="Output JSON file path")
@click.option("--strict", is_flag=True, help="Fail on the first malformed record")
@click.option(
    "--image-trim",
    type=click.Choice(TRIM_CHOICES),
    default=None,
    help="Override the config's match rule for legacy photo URLs",
)
@click.pass_context
def posts(ctx, blog, output, strict, image_trim):
    """Print all posts of BLOG as JSON, sorted by post id.

    BLOG is a blog folder path, or a blog name inside the archive path.
    If -o is not specified, JSON is written to stdout.
    """
    from .converter import posts_to_json
    from .loader import load_blog
    from .models import PostParseError

    config = _load_or_default(ctx.obj["config_path"])
    blog_dir = Path(blog)
    if not blog_dir.is_dir():
        blog_dir = config.archive_path / blog

    try:
        loaded = load_blog(
            blog_dir,
            image_trim=TrimRule(image_trim) if image_trim else config.image_trim,
            media_trim=config.media_trim,
            strict=strict,
        )
    except (FileNotFoundError, PostParseError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Parsed {len(loaded)} posts.", err=True)

    if output:
        output_path = Path(output)
        with open(output_path, "w", encoding="utf-8") as f:
            posts_to_json(loaded, f, indent=config.indent)
        click.echo(f"JSON written to {output_path}", err=True)
    else:
        click.echo(posts_to_json(loaded, indent=config.indent))


@main.command()
@click.pass_context
def status(ctx):
    """Show current configuration and archive summary."""
    from .loader import list_blogs

    config_path = ctx.obj["config_path"]
    has_config = config_exists(config_path)

    click.echo("TumblThree Archive — Status")
    click.echo("=" * 40)
    click.echo(f"Config: {'Found' if has_config else 'Not configured'} ({config_path})")

    config = _load_or_default(config_path)
    click.echo(f"Archive path: {config.archive_path}")
    click.echo(f"Image match rule: {config.image_trim.value}")
    click.echo(f"Media match rule: {config.media_trim.value}")

    if config.archive_path.is_dir():
        click.echo(f"Blogs: {len(list_blogs(config.archive_path))}")
    else:
        click.echo("Archive path: Not found")
