"""
Song Vocabulary Builder - Main Entry Point

Build study vocabulary lists from song lyrics:
- Lyrics from Genius (first search hit)
- Words, meanings, examples and synonyms picked by an LLM
- Per-user word counts, synonym sets, list snapshots and music history in SQLite
"""
import sys
import json
import traceback
import argparse
from pathlib import Path

from loguru import logger

from songvocab.config.settings import get_settings, ensure_directories
from songvocab.database import Database
from songvocab.exceptions import SongVocabError
from songvocab.pipeline import VocabularyPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate vocabulary lists from song lyrics using AI and Genius"
    )
    parser.add_argument("--user", "-u", required=True, help="User id the data belongs to")

    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Extract vocabulary from a song")
    generate.add_argument("song", help="Song title to search for (e.g., 'Diamonds Rihanna')")
    generate.add_argument("--title", "-t", help="List title (defaults to '<song> - <artist>')")
    generate.add_argument(
        "--no-save",
        action="store_true",
        help="Only print the vocabulary, don't store it"
    )

    commands.add_parser("lists", help="Show saved vocabulary lists")
    commands.add_parser("words", help="Show accumulated words with counts and synonyms")
    commands.add_parser("history", help="Show music history")

    history_add = commands.add_parser("history-add", help="Record a watched video or song")
    history_add.add_argument("video_id")
    history_add.add_argument("title")
    history_add.add_argument("--capture-time", type=int, help="Playback position in seconds")
    history_add.add_argument("--origin", help="Where it was watched (default: YouTube)")

    settings = commands.add_parser("settings", help="Show or update vocabulary settings")
    settings.add_argument("--language", choices=["en", "ko"])
    settings.add_argument("--level", choices=["beginner", "intermediate", "advanced"])
    settings.add_argument("--max-words", type=int)
    settings.add_argument("--min-length", type=int)

    return parser


def open_database() -> Database:
    ensure_directories()
    return Database(Path(get_settings().database_path))


def run(args: argparse.Namespace):
    """Execute one command and return something JSON-serializable"""
    db = open_database()
    try:
        if args.command == "generate":
            pipeline = VocabularyPipeline(database=db)
            result = pipeline.generate_vocabulary(
                args.user, args.song, list_title=args.title, persist=not args.no_save
            )
            return result.model_dump(exclude_none=True)
        if args.command == "lists":
            return [item.model_dump(exclude_none=True) for item in db.get_vocabulary_lists(args.user)]
        if args.command == "words":
            return [word.model_dump() for word in db.get_user_words(args.user)]
        if args.command == "history":
            return [record.model_dump() for record in db.get_music_history(args.user)]
        if args.command == "history-add":
            record = db.insert_music_history(
                args.user, args.video_id, args.title,
                capture_time=args.capture_time, origin=args.origin
            )
            return record.model_dump()

        # settings
        changes = [args.language, args.level, args.max_words, args.min_length]
        if any(value is not None for value in changes):
            return db.update_vocabulary_settings(
                args.user,
                language=args.language,
                level=args.level,
                max_words=args.max_words,
                min_length=args.min_length,
            )
        return db.get_vocabulary_settings(args.user) or {}
    finally:
        db.close()


def main():
    args = build_parser().parse_args()

    try:
        output = run(args)
    except KeyboardInterrupt:
        logger.warning("Process interrupted by user")
        sys.exit(1)
    except SongVocabError as e:
        logger.error(f"✗ {type(e).__name__}: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"✗ Error: {e}")
        logger.error(traceback.format_exc())
        sys.exit(1)

    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
