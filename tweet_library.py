#!/usr/bin/env python3
"""
Tweet Library Tool
Browse, filter, tag, archive, import and export saved tweets from the
command line.
"""

import sys
import logging
import argparse
from typing import List, Optional
from data_parser import parse_criteria, parse_tag_list
from errors import LibraryError
from library_controller import LibraryController
from library_store import LibraryStore
from mirror_fetcher import create_mirror_fetcher
from models import DISPLAY_ERROR, LAYOUT_VIRTUAL, ViewFlavor
from settings import load_settings
from storage import get_file_summary, load_json
from view_engine import ListViewEngine
from view_renderer import view_html
from window_calculator import relative_scroll

logger = logging.getLogger(__name__)


def print_view(engine: ListViewEngine) -> None:
    view = engine.last_view
    print("\n" + "=" * 60)
    print("📚 TWEET LIBRARY" if engine.flavor.allows_edits else "📱 TWEET MIRROR (read-only)")
    print("=" * 60)
    if view.placeholder:
        print(view.placeholder)
        print("=" * 60)
        return
    print(f"{view.showing_label} {engine.stats_label()}")
    if not engine.flavor.allows_edits:
        last_updated = engine.last_updated_label()
        if last_updated:
            print(last_updated)
    if view.layout == LAYOUT_VIRTUAL:
        state = engine.state
        print(f"Window: {state.window_start}-{state.window_end} of {len(state.ordered_view)}")
    ordered = engine.get_filtered_view()
    for placed in view.items:
        tweet = ordered[placed.index]
        print(f"\n{placed.index + 1:>5}. @{tweet.author or 'unknown'}  [{placed.rendered.badge_label}]  "
              f"{placed.rendered.date_label}  ({tweet.item_id})")
        text = tweet.text or "No text content"
        print(f"       {text[:100]}{'...' if len(text) > 100 else ''}")
        if tweet.tags:
            print(f"       🏷️  {', '.join(tweet.tags)}")
        if tweet.note:
            print(f"       📝 {tweet.note}")
    print("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tweet Library Tool")
    parser.add_argument("--library", help="Path to the library JSON file (default: TWEET_LIBRARY_PATH)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    commands = parser.add_subparsers(dest="command", required=True)

    def add_view_options(sub):
        sub.add_argument("--search", default="", help="Search text, author, note and tags")
        sub.add_argument("--status", choices=["all", "unread", "archived"], default="all")
        sub.add_argument("--tag", default="all", help="Only tweets carrying this tag")
        sub.add_argument("--sort", choices=["newest", "oldest"], default="newest")
        sub.add_argument("--scroll", type=int, default=0, help="Page scroll offset in pixels")
        sub.add_argument("--container-top", type=int, default=0, help="Page offset of the list container")
        sub.add_argument("--viewport", type=int, help="Viewport height in pixels")
        sub.add_argument("--html", help="Write the rendered list markup to this file")

    add_view_options(commands.add_parser("list", help="Show saved tweets"))
    mirror = commands.add_parser("mirror", help="Show a published read-only mirror")
    mirror.add_argument("url", nargs="?", help="Mirror URL (default: TWEET_LIBRARY_MIRROR_URL)")
    add_view_options(mirror)

    save = commands.add_parser("save", help="Save a tweet")
    save.add_argument("tweet_id")
    save.add_argument("--url", default="")
    save.add_argument("--author", default="")
    save.add_argument("--text", default="")

    toggle = commands.add_parser("toggle", help="Flip a tweet between unread and archived")
    toggle.add_argument("tweet_id")

    edit = commands.add_parser("edit", help="Edit tags, note or status")
    edit.add_argument("tweet_id")
    edit.add_argument("--tags", help="Comma separated tags (replaces existing)")
    edit.add_argument("--note")
    edit.add_argument("--status", choices=["unread", "archived"])

    delete = commands.add_parser("delete", help="Delete a tweet")
    delete.add_argument("tweet_id")

    import_cmd = commands.add_parser("import", help="Import a backup file")
    import_cmd.add_argument("path")

    export = commands.add_parser("export", help="Export the library")
    export.add_argument("path")
    export.add_argument("--mirror", action="store_true", help="Write the bare array used by the mirror page")

    commands.add_parser("stats", help="Show unread/archived counts")
    commands.add_parser("tags", help="List all tags")
    return parser


def show_view(engine: ListViewEngine, args) -> int:
    if engine.last_view is not None and engine.last_view.display_state == DISPLAY_ERROR:
        print_view(engine)
        return 1
    engine.apply_criteria(parse_criteria({
        "search_term": args.search,
        "status_filter": args.status,
        "tag_filter": args.tag,
        "sort_order": args.sort,
    }))
    engine.set_geometry(relative_scroll(args.scroll, args.container_top), args.viewport)
    engine.render()
    print_view(engine)
    if args.html:
        if not _write_text(args.html, view_html(engine.last_view)):
            logger.error(f"❌ Failed to write {args.html}")
            return 1
        logger.info(f"✅ Markup written to {args.html}")
    return 0


def _write_text(path: str, text: str) -> bool:
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return True
    except OSError as e:
        logger.error(f"Error writing {path}: {e}")
        return False


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = load_settings()

    def notify(message: str):
        logger.warning(f"⚠️  {message}")

    if args.command == "mirror":
        fetcher = create_mirror_fetcher(args.url or settings.mirror_url)
        if not fetcher:
            return 1
        settings.view.flavor = ViewFlavor.READ_ONLY
        engine = ListViewEngine(settings.view)
        LibraryController(engine, fetcher, notify).load()
        return show_view(engine, args)

    store = LibraryStore(args.library or settings.library_path)
    engine = ListViewEngine(settings.view)
    controller = LibraryController(engine, store, notify)
    if not controller.load():
        print_view(engine)
        return 1

    if args.command == "list":
        return show_view(engine, args)

    if args.command == "save":
        ok = controller.save_discovered({
            "tweetId": args.tweet_id, "url": args.url, "author": args.author, "text": args.text,
        })
        print("✅ Saved" if ok else "ℹ️  Not saved (already in library?)")
        return 0 if ok else 1

    if args.command == "toggle":
        ok = controller.toggle_status(args.tweet_id)
        if ok:
            print(f"✅ {args.tweet_id} is now {engine.store.find(args.tweet_id).status}")
        return 0 if ok else 1

    if args.command == "edit":
        tags = parse_tag_list(args.tags) if args.tags is not None else None
        note = args.note.strip() if args.note is not None else None
        ok = controller.edit(args.tweet_id, tags=tags, note=note, status=args.status)
        print("✅ Changes saved" if ok else "❌ Failed to save changes")
        return 0 if ok else 1

    if args.command == "delete":
        ok = controller.delete(args.tweet_id)
        print("🗑️  Deleted" if ok else "❌ Failed to delete tweet")
        return 0 if ok else 1

    if args.command == "import":
        data = load_json(args.path)
        if data is None:
            return 1
        counts = controller.import_document(data)
        if counts is None:
            return 1
        print(f"📥 Imported: {counts['imported_count']}  Skipped: {counts['skipped_count']}")
        return 0

    if args.command == "export":
        writer = controller.export_mirror if args.mirror else controller.export_backup
        if not writer(args.path):
            logger.error("❌ Export failed")
            return 1
        summary = get_file_summary(args.path)
        print(f"📁 {summary['file']}")
        print(f"   Size: {summary['size_bytes']:,} bytes ({summary['size_bytes'] / 1024:.1f} KB)")
        print(f"   Tweets: {summary['tweet_count']:,}")
        return 0

    if args.command == "stats":
        print(f"{len(engine.get_all())} tweets {controller.stats_label()}")
        return 0

    if args.command == "tags":
        for tag in controller.tags():
            print(tag)
        return 0

    return 1


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        logger.info("⏹️  Interrupted by user")
        sys.exit(0)
    except LibraryError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
