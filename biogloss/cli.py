#!/usr/bin/env python3
"""
BioGloss CLI Interface
Command-line interface for annotating documents with glossary terms
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import aiohttp
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from biogloss.core.annotator import AnnotatedDocument, escape_text
from biogloss.core.catalog import MODE_LABELS
from biogloss.core.config import DICTIONARY_MODES, AnnotationConfig, BioGlossConfig
from biogloss.core.errors import BioGlossError, ExtractionError
from biogloss.core.pipeline import AnnotationSession

console = Console()

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<pre class="article-content">{content}</pre>
</body>
</html>
"""


class BioGlossCLI:
    """Command-line interface for BioGloss"""

    def __init__(self, config: BioGlossConfig):
        self.config = config
        self.session = AnnotationSession(config)

    async def annotate(self, file_path: str, annotation: AnnotationConfig) -> Optional[AnnotatedDocument]:
        """Annotate one document, sharing a single HTTP session for lookups"""
        async with aiohttp.ClientSession() as http:
            self.session.http_session = http
            try:
                return await self.session.annotate_file(file_path, annotation)
            finally:
                self.session.http_session = None

    async def define(self, words: List[str]) -> List[tuple]:
        async with aiohttp.ClientSession() as http:
            self.session.http_session = http
            try:
                return [(word, await self.session.define(word)) for word in words]
            finally:
                self.session.http_session = None

    def run_annotate(self, file_path: str, annotation: AnnotationConfig, output: Optional[str]) -> int:
        with console.status(f"[bold green]Annotating {Path(file_path).name}..."):
            try:
                document = asyncio.run(self.annotate(file_path, annotation))
            except ExtractionError as e:
                console.print(f"❌ {self.session.status[0]} {str(e)}", style="red")
                return 1

        stats = document.stats()
        console.print(f"✅ {self.session.status[0]}", style="green")

        table = Table(title="🔬 Annotated Terms")
        table.add_column("Term", style="cyan")
        table.add_column("Source", style="yellow")
        table.add_column("Definition", style="green", overflow="fold")

        seen = set()
        for span in document.spans:
            if span.term in seen:
                continue
            seen.add(span.term)
            definition = span.definition or self.session.definition_for(span.term) or ""
            table.add_row(span.term, MODE_LABELS.get(span.source, span.source), definition)

        if seen:
            console.print(table)
        console.print(
            f"[dim]{stats['scientific_terms']} scientific and {stats['simple_terms']} "
            f"simple-English annotations[/dim]"
        )

        if output:
            html = HTML_TEMPLATE.format(title=escape_text(Path(file_path).name), content=document.to_html())
            Path(output).write_text(html, encoding='utf-8')
            console.print(f"✅ Wrote annotated document to {output}", style="green")

        return 0

    def run_define(self, words: List[str]) -> int:
        with console.status("[bold cyan]Looking up definitions..."):
            results = asyncio.run(self.define(words))

        for word, definition in results:
            if definition:
                console.print(Panel(definition, title=f"📖 {word}", border_style="cyan"))
            else:
                console.print(f"No definition found for '{word}'", style="yellow")

        return 0 if all(definition for _, definition in results) else 1

    def run_terms(self, mode: str, query: Optional[str]) -> int:
        catalog = self.session.catalog
        if query:
            terms = catalog.search_terms(query, mode)
        else:
            terms = sorted(catalog.for_mode(mode).items())

        table = Table(title=f"📚 {MODE_LABELS.get(mode, mode)} dictionary")
        table.add_column("Term", style="cyan")
        table.add_column("Definition", style="green", overflow="fold")
        for term, definition in terms:
            table.add_row(term, definition)

        console.print(table)
        return 0

    def run_export(self, mode: str, format: str) -> int:
        console.print(self.session.catalog.export_catalog(mode, format), markup=False, highlight=False)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BioGloss - Glossary annotation for scientific documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Tag microbiology terms in a PDF and write HTML
  biogloss annotate paper.pdf --mode micro --output paper.html

  # Also define everyday words through the dictionary service
  biogloss annotate notes.txt --simple-english

  # Look up words
  biogloss define ubiquitous salient

  # Browse the built-in dictionaries
  biogloss terms --mode genetics
  biogloss export --format csv
        """
    )

    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--catalog", help="YAML file with custom dictionaries")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    annotate = subparsers.add_parser("annotate", help="Annotate a PDF, HTML or text document")
    annotate.add_argument("file", help="Document to annotate")
    annotate.add_argument("--mode", "-m", choices=DICTIONARY_MODES, help="Dictionary mode")
    annotate.add_argument("--no-scientific", action="store_true", help="Disable scientific dictionary terms")
    annotate.add_argument("--simple-english", "-s", action="store_true",
                          help="Define other words through the dictionary service")
    annotate.add_argument("--output", "-o", help="Write annotated HTML to this file")

    define = subparsers.add_parser("define", help="Look up words in the dictionary service")
    define.add_argument("words", nargs="+")

    terms = subparsers.add_parser("terms", help="List dictionary terms")
    terms.add_argument("--mode", "-m", choices=DICTIONARY_MODES, default="combined")
    terms.add_argument("--search", "-q", help="Only terms matching this query")

    export = subparsers.add_parser("export", help="Export a dictionary")
    export.add_argument("--mode", "-m", choices=DICTIONARY_MODES, default="combined")
    export.add_argument("--format", "-f", choices=["json", "yaml", "csv", "html"], default="json")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = BioGlossConfig.load_from_file(args.config) if args.config else BioGlossConfig()
        if args.catalog:
            config.catalog_path = args.catalog
        if args.verbose:
            config.log_level = "DEBUG"

        logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))

        cli = BioGlossCLI(config)
    except (ValueError, BioGlossError) as e:
        console.print(f"❌ {str(e)}", style="red")
        return 2

    if args.command == "annotate":
        defaults = config.annotation
        annotation = AnnotationConfig(
            dictionary_mode=args.mode or defaults.dictionary_mode,
            scientific_enabled=defaults.scientific_enabled and not args.no_scientific,
            simple_english_enabled=defaults.simple_english_enabled or args.simple_english,
        )
        return cli.run_annotate(args.file, annotation, args.output)

    if args.command == "define":
        return cli.run_define(args.words)

    if args.command == "terms":
        return cli.run_terms(args.mode, args.search)

    return cli.run_export(args.mode, args.format)


if __name__ == "__main__":
    sys.exit(main())
