"""Command-line interface for generating and publishing articles."""

from __future__ import annotations

import argparse
import html
import json
import sys
from pathlib import Path
from typing import Callable, Sequence

import requests
from dotenv import load_dotenv

from ..ai import ArticleGenerationError, ArticleWriter, PromptKind, Style, detect_kind, link_content
from ..ai.prompts import STYLE_LABELS
from ..platforms import PlatformNotFoundError, PublishOptions, PublishResult, PublishStatus
from ..platforms.markup import markdown_to_html
from ..services import UNTITLED, MultiPublisher, parse_article
from ..settings import AppConfig, load_config, resolve_publishers
from ..utils import dated_path, fetch_page_text, read_text, write_text
from ..utils.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)

PREVIEW_CHARS = 2000
BATCH_SUFFIXES = (".txt", ".md")

_HTML_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{title}</title>
  <style>
    body {{ max-width: 720px; margin: 0 auto; padding: 24px; font-size: 16px; line-height: 1.8; color: #333; }}
    h1, h2, h3 {{ color: #1a1a1a; }}
    pre {{ background: #f6f8fa; padding: 12px; overflow-x: auto; border-radius: 6px; }}
    code {{ background: #f6f8fa; padding: 2px 4px; border-radius: 3px; }}
    blockquote {{ border-left: 4px solid #ddd; margin: 0; padding-left: 16px; color: #666; }}
    .footer {{ color: #999; font-size: 13px; text-align: center; }}
  </style>
</head>
<body>
{body}
<hr>
<div class="footer"><p>Generated by ai-writer</p></div>
</body>
</html>
"""


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else None, structured=not args.log_plain)

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1
    return handler(args)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ai-writer", description="Turn notes into articles and publish them")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")
    _add_generate_commands(subparsers)
    _add_publish_commands(subparsers)
    return parser


def _add_generation_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--style", choices=[style.value for style in Style], default=None)
    parser.add_argument(
        "--publish",
        dest="fan_out",
        action="store_true",
        help="Publish the generated article to every configured platform",
    )
    parser.add_argument(
        "--status",
        choices=[status.value for status in PublishStatus],
        default=PublishStatus.DRAFT.value,
    )


def _add_generate_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    chat_parser = subparsers.add_parser("chat", help="Turn an AI chat transcript into an article")
    chat_parser.add_argument("file", type=Path)
    _add_generation_flags(chat_parser)
    chat_parser.set_defaults(handler=_handle_chat)

    link_parser = subparsers.add_parser("link", help="Write an article from a link plus your notes")
    link_parser.add_argument("url")
    link_parser.add_argument("note", nargs="*")
    _add_generation_flags(link_parser)
    link_parser.set_defaults(handler=_handle_link)

    text_parser = subparsers.add_parser("text", help="Write an article from free text or a file")
    text_parser.add_argument("content", nargs="+")
    _add_generation_flags(text_parser)
    text_parser.set_defaults(handler=_handle_text)

    batch_parser = subparsers.add_parser("batch", help="Generate one article per .txt/.md file")
    batch_parser.add_argument("directory", type=Path)
    batch_parser.set_defaults(handler=_handle_batch)

    style_parser = subparsers.add_parser("style", help="Write an article in a platform's style")
    style_parser.add_argument("style", choices=[style.value for style in Style])
    style_parser.add_argument("content", nargs="+")
    style_parser.set_defaults(handler=_handle_style)


def _add_publish_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    publish_parser = subparsers.add_parser("publish", help="Publish a Markdown file")
    publish_parser.add_argument("file", type=Path)
    publish_parser.add_argument(
        "--status",
        choices=[status.value for status in PublishStatus],
        default=PublishStatus.DRAFT.value,
    )
    publish_parser.add_argument("--title", default=None, help="Override the article title")
    publish_parser.add_argument("--tag", dest="tags", action="append", default=[])
    publish_parser.add_argument("--category", dest="categories", action="append", default=[])
    publish_parser.add_argument("--platform", default=None, help="Only publish to this platform")
    publish_parser.add_argument("--json", action="store_true", help="Print results as JSON")
    publish_parser.set_defaults(handler=_handle_publish)

    platforms_parser = subparsers.add_parser("platforms", help="List configured platforms")
    platforms_parser.set_defaults(handler=_handle_platforms)


def _build_writer(config: AppConfig) -> ArticleWriter:
    return ArticleWriter.from_settings(config.ai)


def _build_publisher(config: AppConfig) -> MultiPublisher:
    return MultiPublisher(resolve_publishers(), timeout=config.http.timeout)


def _handle_chat(args: argparse.Namespace) -> int:
    if not args.file.is_file():
        LOGGER.error("File not found", extra={"event": "cli.error", "path": str(args.file)})
        return 1
    return _generate(args, read_text(args.file), PromptKind.CHAT)


def _handle_link(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    note = " ".join(args.note)
    try:
        page_text = fetch_page_text(args.url, timeout=config.http.timeout)
    except requests.RequestException as exc:
        LOGGER.warning(
            "Could not fetch page; using the note only: %s",
            exc,
            extra={"event": "link.fetch_failed", "url": args.url},
        )
        page_text = None
    return _generate(args, link_content(args.url, note, page_text), PromptKind.LINK, config=config)


def _handle_text(args: argparse.Namespace) -> int:
    joined = " ".join(args.content)
    candidate = Path(joined)
    is_file = len(args.content) == 1 and candidate.suffix in BATCH_SUFFIXES and candidate.is_file()
    content = read_text(candidate) if is_file else joined
    return _generate(args, content, detect_kind(content))


def _handle_style(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    content = " ".join(args.content)
    try:
        article = _build_writer(config).write(content, PromptKind.DEFAULT, args.style)
    except ArticleGenerationError as exc:
        LOGGER.error("Article generation failed: %s", exc, extra={"event": "cli.error"})
        return 1
    label = STYLE_LABELS[Style(args.style)]
    path = dated_path(config.paths.output_dir, f"-{label}.md")
    write_text(path, article)
    LOGGER.info("Styled article saved", extra={"event": "cli.saved", "path": str(path), "style": args.style})
    print(article)
    return 0


def _handle_batch(args: argparse.Namespace) -> int:
    if not args.directory.is_dir():
        LOGGER.error("Directory not found", extra={"event": "cli.error", "path": str(args.directory)})
        return 1
    files = sorted(path for path in args.directory.iterdir() if path.suffix in BATCH_SUFFIXES)
    if not files:
        LOGGER.error("No text files found", extra={"event": "cli.error", "path": str(args.directory)})
        return 1

    config = load_config(args.config)
    writer = _build_writer(config)
    succeeded = 0
    for index, path in enumerate(files, start=1):
        LOGGER.info(
            "Processing file %d/%d",
            index,
            len(files),
            extra={"event": "batch.file", "path": str(path)},
        )
        content = read_text(path)
        try:
            article = writer.write(content, detect_kind(content))
        except ArticleGenerationError as exc:
            LOGGER.error("Generation failed: %s", exc, extra={"event": "batch.failed", "path": str(path)})
            continue
        _save_article(config.paths.output_dir, article, stem=f"{path.stem}-article", fallback_title=path.stem)
        succeeded += 1
    print(f"{succeeded}/{len(files)} succeeded")
    return 0


def _handle_publish(args: argparse.Namespace) -> int:
    if not args.file.is_file():
        LOGGER.error("File not found", extra={"event": "cli.error", "path": str(args.file)})
        return 1
    config = load_config(args.config)
    options = PublishOptions(
        status=PublishStatus(args.status),
        title=args.title,
        tags=tuple(args.tags),
        categories=tuple(args.categories),
    )
    publisher = _build_publisher(config)
    raw_text = read_text(args.file)
    if args.platform:
        try:
            results = [publisher.publish_to(args.platform, raw_text, options)]
        except PlatformNotFoundError as exc:
            LOGGER.error("%s", exc, extra={"event": "cli.error", "platform": args.platform})
            return 2
    else:
        results = publisher.publish(raw_text, options)
    if args.json:
        print(json.dumps([result.as_dict() for result in results], ensure_ascii=False, indent=2))
    else:
        _print_results(results)
    return 0 if all(result.success for result in results) else 1


def _handle_platforms(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    names = _build_publisher(config).configured_platforms()
    if not names:
        print("No platforms configured")
        return 0
    for name in names:
        print(name)
    return 0


def _generate(
    args: argparse.Namespace,
    content: str,
    kind: PromptKind,
    *,
    config: AppConfig | None = None,
) -> int:
    config = config or load_config(args.config)
    try:
        article = _build_writer(config).write(content, kind, args.style)
    except ArticleGenerationError as exc:
        LOGGER.error("Article generation failed: %s", exc, extra={"event": "cli.error"})
        return 1

    _save_article(config.paths.output_dir, article)
    print(article[:PREVIEW_CHARS])
    if len(article) > PREVIEW_CHARS:
        print("\n... (see the saved file for the rest)")

    if not args.fan_out:
        return 0
    results = _build_publisher(config).publish(article, PublishOptions(status=PublishStatus(args.status)))
    _print_results(results)
    return 0 if all(result.success for result in results) else 1


def _save_article(
    output_dir: Path,
    article: str,
    *,
    stem: str | None = None,
    fallback_title: str = "AI article",
) -> tuple[Path, Path]:
    if stem:
        md_path, html_path = output_dir / f"{stem}.md", output_dir / f"{stem}.html"
    else:
        md_path = dated_path(output_dir, ".md")
        html_path = md_path.with_suffix(".html")
    parsed = parse_article(article)
    title = fallback_title if parsed.title == UNTITLED else parsed.title
    write_text(md_path, article)
    write_text(html_path, render_html_page(article, title))
    LOGGER.info(
        "Article saved",
        extra={"event": "cli.saved", "markdown": str(md_path), "html": str(html_path)},
    )
    return md_path, html_path


def render_html_page(article: str, title: str) -> str:
    return _HTML_PAGE.format(title=html.escape(title), body=markdown_to_html(article))


def _print_results(results: Sequence[PublishResult]) -> None:
    if not results:
        print("No platforms configured; nothing was published")
        return
    succeeded = sum(result.success for result in results)
    print(f"Published {succeeded}/{len(results)}")
    for result in results:
        marker = "ok" if result.success else "FAILED"
        line = f"[{marker}] {result.platform}"
        if result.url:
            line += f" {result.url}"
        detail = result.error or result.message
        if detail:
            line += f" - {detail}"
        print(line)
        if result.copy_content:
            print(f"----- copy content for {result.platform} -----")
            print(result.copy_content)
            print("-" * 40)


__all__ = ["main", "render_html_page"]
