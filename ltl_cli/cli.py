"""
LTL CLI - Main Command Line Interface

This module provides the ``ltl`` command: CoNLL-U to Turtle conversion,
CoNLL-U validation, metadata extraction and the HTTP API server.
"""

from __future__ import annotations
import logging
import sys
import json
from pathlib import Path
from typing import Optional, List
import argparse

from ltl_core.models import CitationLabels, ConversionOptions, DocumentMetadata
from ltl_core.config_runtime import DEFAULT_SETTINGS, RuntimeConfig, get_runtime_config
from ltl_core.logging_monitoring import setup_logging
from ltl_io.format_converters import FormatConverter, extract_metadata, read_conllu_file
from ltl_qa.validators import validate_conllu_file

logger = logging.getLogger(__name__)


def configure_logging(config: RuntimeConfig, verbose: bool = False, debug: bool = False):
    """Setup logging from flags, falling back to the configured level"""
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = config.get_setting("logging", "level", DEFAULT_SETTINGS["logging"]["level"])

    setup_logging(
        level=level,
        json_format=config.get_setting("logging", "format") == "json",
        log_file=config.get_setting("logging", "file"),
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser"""
    parser = argparse.ArgumentParser(
        prog="ltl",
        description="LiITA Text Linker: CoNLL-U to POWLA/LiLa Turtle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ltl convert text.conllu -o text.ttl
  ltl convert text.conllu --no-morphological-layer --doc-title "Commedia"
  ltl validate text.conllu --format json
  ltl metadata text.conllu
  ltl server start --port 8000
        """
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_convert_commands(subparsers)
    add_validate_commands(subparsers)
    add_metadata_commands(subparsers)
    add_server_commands(subparsers)

    return parser


def add_convert_commands(subparsers):
    """Add conversion command"""
    convert_parser = subparsers.add_parser("convert", help="Convert CoNLL-U to Turtle")
    convert_parser.add_argument("input", help="CoNLL-U file")
    convert_parser.add_argument("-o", "--output", help="Turtle output file (default: stdout)")

    layers = convert_parser.add_argument_group("layers")
    layers.add_argument("--no-citation-layer", action="store_true", help="Omit the citation structure")
    layers.add_argument(
        "--no-morphological-layer", action="store_true",
        help="Omit dependency relations and morphology annotations"
    )
    layers.add_argument("--document-label", help="Label of document citation units")
    layers.add_argument("--paragraph-label", help="Label of paragraph citation units")
    layers.add_argument("--sentence-label", help="Label of sentence citation units")

    metadata = convert_parser.add_argument_group("metadata (overrides # key = value comments)")
    metadata.add_argument("--doc-id", default="", help="Document id")
    metadata.add_argument("--doc-title", default="", help="Document title")
    metadata.add_argument("--contributor", default="", help="Contributor")
    metadata.add_argument("--corpus-ref", default="", help="Corpus URI")
    metadata.add_argument("--doc-author", default="", help="Author URI")
    metadata.add_argument("--see-also", default="", help="Related resource URI")
    metadata.add_argument("--description", default="", help="Document description")

    convert_parser.add_argument("--strict", action="store_true", help="Fail on lines with too few fields")
    convert_parser.add_argument("--validate", action="store_true", help="Validate before converting")


def add_validate_commands(subparsers):
    """Add validation command"""
    validate_parser = subparsers.add_parser("validate", help="Validate a CoNLL-U file")
    validate_parser.add_argument("input", help="CoNLL-U file")
    validate_parser.add_argument("--format", choices=["text", "json"], default="text")


def add_metadata_commands(subparsers):
    """Add metadata command"""
    metadata_parser = subparsers.add_parser("metadata", help="Show document metadata comments")
    metadata_parser.add_argument("input", help="CoNLL-U file")


def add_server_commands(subparsers):
    """Add server commands"""
    server_parser = subparsers.add_parser("server", help="API server")
    server_subparsers = server_parser.add_subparsers(dest="server_command")

    start_parser = server_subparsers.add_parser("start", help="Start server")
    start_parser.add_argument("--host", help="Host to bind")
    start_parser.add_argument("--port", type=int, help="Port to bind")
    start_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")


def build_conversion_options(args, config: RuntimeConfig) -> ConversionOptions:
    """Configured conversion options with command line overrides"""
    options = config.conversion_options()
    labels = options.citation_labels
    return ConversionOptions(
        include_citation_layer=options.include_citation_layer and not args.no_citation_layer,
        include_morphological_layer=(
            options.include_morphological_layer and not args.no_morphological_layer
        ),
        citation_labels=CitationLabels(
            document_label=args.document_label or labels.document_label,
            paragraph_label=args.paragraph_label or labels.paragraph_label,
            sentence_label=args.sentence_label or labels.sentence_label,
        ),
    )


def handle_convert_command(args, config: RuntimeConfig) -> int:
    """Handle conversion command"""
    overrides = DocumentMetadata(
        doc_id=args.doc_id,
        doc_title=args.doc_title,
        contributor=args.contributor,
        corpus_ref=args.corpus_ref,
        doc_author=args.doc_author,
        see_also=args.see_also,
        description=args.description,
    )

    converter = FormatConverter(
        options=build_conversion_options(args, config),
        strict=args.strict or bool(config.get_setting("parser", "strict", False)),
        validate=args.validate,
        default_corpus_ref=config.get_setting("conversion", "default_corpus_ref", ""),
    )
    result = converter.convert_file(args.input, args.output, overrides)

    for warning in result.warnings:
        logger.warning(warning)

    if not result.success:
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    if args.output:
        print(
            f"Wrote {result.triples_written} triples "
            f"({result.sentences_converted} sentences, {result.tokens_converted} tokens) "
            f"to {result.output_path}"
        )
    else:
        sys.stdout.write(result.output_string)
        sys.stdout.write("\n")
    return 0


def handle_validate_command(args) -> int:
    """Handle validation command"""
    if not Path(args.input).exists():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1

    result = validate_conllu_file(Path(args.input))

    if args.format == "json":
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        for error in result.errors:
            print(error)
        for warning in result.warnings:
            print(f"Warning: {warning}")
        if result.is_valid:
            print(f"Valid: {result.validated_sentences} sentences, {result.validated_lines} lines")
        else:
            print(f"Invalid: {len(result.errors)} errors")

    return 0 if result.is_valid else 1


def handle_metadata_command(args) -> int:
    """Handle metadata command"""
    document = read_conllu_file(args.input)
    metadata = extract_metadata(document)
    print(json.dumps(metadata.to_dict(), indent=2, ensure_ascii=False))
    return 0


def handle_server_command(args, config: RuntimeConfig) -> int:
    """Handle server commands"""
    if args.server_command == "start":
        import uvicorn
        from ltl_api.app import APIConfig, create_app

        api_config = APIConfig.from_runtime_config(
            config, host=args.host, port=args.port, debug=args.reload
        )
        print(f"Starting server on {api_config.host}:{api_config.port}...")

        uvicorn.run(create_app(api_config), host=api_config.host, port=api_config.port)
        return 0

    print("Usage: ltl server <command>")
    print("Commands: start")
    return 1


def cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    config = get_runtime_config(parsed_args.config)
    configure_logging(config, parsed_args.verbose, parsed_args.debug)

    if not parsed_args.command:
        parser.print_help()
        return 0

    try:
        if parsed_args.command == "convert":
            return handle_convert_command(parsed_args, config)
        elif parsed_args.command == "validate":
            return handle_validate_command(parsed_args)
        elif parsed_args.command == "metadata":
            return handle_metadata_command(parsed_args)
        elif parsed_args.command == "server":
            return handle_server_command(parsed_args, config)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except (OSError, ValueError) as e:
        logger.error(f"Error: {e}", exc_info=parsed_args.debug)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main():
    """Main entry point"""
    sys.exit(cli())


if __name__ == "__main__":
    main()
