# src/codetally/cli.py
import sys
import argparse
import asyncio
import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Callable, Dict, Optional, Set

# Module imports
from codetally.config import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_LINES, AnalyzerSettings
from codetally.core.analyzer import FileAnalyzer
from codetally.core.ignore import load_ignore_spec
from codetally.core.scanner import ProjectScanner, read_source
from codetally.errors import AnalysisError
from codetally.models import FileEntry, FolderStats, SourceFile
from codetally.utils.tokenizer import Tokenizer


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Count blank, comment and code lines, plus an estimate of declared variables, in source files."
    )
    parser.add_argument("path", type=str, nargs="?", default=os.getcwd(), help="Source file or project directory")
    parser.add_argument("-e", "--extensions", type=str, default="*", help="Comma-separated file extensions or '*' for every supported language")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help="Lines classified per batch")
    parser.add_argument("--max-lines", type=int, default=DEFAULT_MAX_LINES, help="Reject files with more lines than this")
    parser.add_argument("--tokens", action="store_true", help="Also estimate LLM tokens per file")
    parser.add_argument("--top", type=int, default=10, help="Number of largest files to list")
    parser.add_argument("-o", "--output", type=str, default=None, help="Write the full report as JSON to this file")
    parser.add_argument("-q", "--quiet", action="store_true", help="No progress output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def parse_extensions(raw: str) -> Optional[Set[str]]:
    raw = raw.strip()
    if raw == "*" or not raw:
        return None
    return {"." + e.strip().lstrip(".").lower() for e in raw.split(",") if e.strip()}


def format_file_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    size = float(num_bytes)
    i = 0
    while size >= 1024 and i < len(sizes) - 1:
        size /= 1024
        i += 1
    return f"{round(size, 2):g} {sizes[i]}"


def make_progress_printer(label: str, quiet: bool) -> Optional[Callable[[float], None]]:
    if quiet:
        return None

    def _print(percent: float) -> None:
        print(f"\r{label}: {percent:5.1f}%", end="", file=sys.stderr, flush=True)
        if percent >= 100:
            print(file=sys.stderr)

    return _print


def print_file_report(entry: FileEntry, size_bytes: Optional[int], tokens: Optional[int]) -> None:
    stats = entry.stats
    print(f"\n--- {entry.filename} ({entry.language}) ---")
    print(f"{'Kind':<10} | {'Lines':>8} | {'Share':>7}")
    print("-" * 32)
    print(f"{'Blank':<10} | {stats.blank:>8} | {stats.blank_ratio:>6.1f}%")
    print(f"{'Comment':<10} | {stats.comment:>8} | {stats.comment_ratio:>6.1f}%")
    print(f"{'Code':<10} | {stats.code:>8} | {stats.code_density:>6.1f}%")
    print("-" * 32)
    print(f"Total lines:        {stats.total}")
    print(f"Variables:          {stats.variables}")
    print(f"Variables per line: {stats.variables_per_line:.2f}")
    if size_bytes is not None:
        print(f"File size:          {format_file_size(size_bytes)}")
    if tokens is not None:
        print(f"Tokens (est.):      {tokens}")


def print_folder_report(folder: FolderStats, top: int, tokens: Dict[str, int]) -> None:
    print("\n--- Folder Analysis ---")
    languages = ", ".join(f"{name} ({count} files)" for name, count in folder.languages().items())
    print(f"Languages:   {languages or '-'}")
    print(f"Total files: {folder.total_files}")
    print(f"Total lines: {folder.total_lines:,}")
    print("-" * 60)
    print(f"{'Language':<12} | {'Files':>5} | {'Blank':>8} | {'Comment':>8} | {'Code':>8} | {'Vars':>6}")
    print("-" * 60)
    for name, stats in folder.per_language.items():
        print(f"{name:<12} | {stats.files:>5} | {stats.blank:>8} | {stats.comment:>8} | {stats.code:>8} | {stats.variables:>6}")
    print("-" * 60)
    print(f"Code density:           {folder.code_density:.1f}%")
    print(f"Comment ratio:          {folder.comment_ratio:.1f}%")
    print(f"Variables per line:     {folder.variables_per_line:.2f}")
    print(f"Average lines per file: {folder.average_lines_per_file:.1f}")

    if folder.per_file and top > 0:
        largest = sorted(folder.per_file, key=lambda e: e.stats.code, reverse=True)[:top]
        print(f"\n--- Top {len(largest)} Files (Code Lines) ---")
        header = f"{'Rank':<5} | {'Code':<8} | {'Vars':<6} | "
        if tokens:
            header += f"{'Tokens':<8} | "
        print(header + "File Path")
        print("-" * 60)
        for i, e in enumerate(largest):
            row = f"{i+1:<5} | {e.stats.code:<8} | {e.stats.variables:<6} | "
            if tokens:
                row += f"{tokens.get(e.filename, 0):<8} | "
            print(row + e.filename)

    if folder.skipped:
        print(f"\nSkipped {len(folder.skipped)} file(s):")
        for item in folder.skipped:
            print(f"  {item.filename}: {item.reason}")


def write_json_report(output_file: Path, payload: dict) -> None:
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        print(f"\nReport written to: {output_file}")
    except IOError as e:
        print(f"Error writing file: {e}", file=sys.stderr)


def with_token_count(source: SourceFile, tokens: Dict[str, int]) -> SourceFile:
    """Wraps a loader so the text it returns is also token-counted."""

    def load() -> str:
        text = source.load()
        tokens[source.display_name] = Tokenizer.count(text)
        return text

    return dataclasses.replace(source, load=load)


def run_file(path: Path, analyzer: FileAnalyzer, args) -> None:
    # Unsupported files are reported before any I/O
    analyzer.resolve(path.name)
    text = read_source(path, path.name)

    progress = make_progress_printer(f"Analyzing {path.name}", args.quiet)
    entry = asyncio.run(analyzer.analyze_text(path.name, text, on_progress=progress))

    tokens = Tokenizer.count(text) if args.tokens else None
    print_file_report(entry, path.stat().st_size, tokens)

    if args.output:
        payload = entry.to_dict()
        if tokens is not None:
            payload["tokens"] = tokens
        write_json_report(Path(args.output), payload)


def run_folder(root_dir: Path, analyzer: FileAnalyzer, args) -> None:
    ignore_spec = load_ignore_spec(root_dir, extra_patterns=[Path(args.output).name] if args.output else None)
    scanner = ProjectScanner(root_dir, ignore_spec, analyzer.registry, parse_extensions(args.extensions))
    sources = list(scanner.scan())

    if not sources:
        registry = analyzer.registry
        print("No supported files found.")
        print(f"Supported languages: {', '.join(registry.language_names())}")
        print(f"Supported extensions: {', '.join(sorted(registry.supported_extensions()))}")
        return

    tokens: Dict[str, int] = {}
    if args.tokens:
        sources = [with_token_count(s, tokens) for s in sources]

    print(f"Analyzing {len(sources)} files...")
    progress = make_progress_printer("Progress", args.quiet)
    folder = asyncio.run(analyzer.analyze_folder(sources, on_progress=progress))
    print_folder_report(folder, args.top, tokens)

    if args.output:
        payload = folder.to_dict()
        if args.tokens:
            payload["tokens"] = tokens
        write_json_report(Path(args.output), payload)


def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="  > [%(levelname)s] %(message)s",
        )

        target = Path(args.path).resolve()
        if not target.exists():
            print(f"Error: Path not found '{target}'", file=sys.stderr)
            sys.exit(1)

        settings = AnalyzerSettings(chunk_size=args.chunk_size, max_lines=args.max_lines)
        analyzer = FileAnalyzer(settings=settings)

        print("--- codetally ---")
        print(f"Target: {target}")

        # 2. Single file failures are terminal, folder failures are per file
        if target.is_dir():
            run_folder(target, analyzer, args)
        else:
            run_file(target, analyzer, args)

    except AnalysisError as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
