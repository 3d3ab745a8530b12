"""Command-line entry point for duplicate-content analysis.

Reads a JSON product export (a list of products, or an object with a
``products`` list), runs the analysis and writes the JSON report to stdout or
a file. With ``--product-id`` it prints similar-product suggestions instead.
"""
from dotenv import load_dotenv
import argparse
import asyncio
import json
import sys
from typing import Any, List, Optional

from pydantic import ValidationError

from dupcontent.analyzer import analyze, analyze_async
from dupcontent.config import EngineConfig, reload_config
from dupcontent.errors import DuplicateContentError
from dupcontent.suggestions import suggest_similar_products
from dupcontent.utils.logger import configure_logging, log_analysis_progress, log_error, log_warning

CLI_MAX_PRODUCTS = 250


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect duplicate and templated product descriptions.")
    parser.add_argument('--input', '-i', required=True, help='Path to a JSON product export ("-" for stdin).')
    parser.add_argument('--output', '-o', help='Write the JSON result to this file instead of stdout.')
    parser.add_argument('--min-length', type=int, help='Minimum description length for exact/similar analysis.')
    parser.add_argument('--similar-threshold', type=float, help='Token similarity above which descriptions are near-duplicates.')
    parser.add_argument('--template-threshold', type=float, help='N-gram similarity above which a description matches a template.')
    parser.add_argument('--max-products', type=int, help=f'Input cap (0 = no limit, default {CLI_MAX_PRODUCTS} unless configured).')
    parser.add_argument('--async', dest='async_enabled', action='store_true', help='Run near-duplicate comparisons in parallel.')
    parser.add_argument('--workers', type=int, help='Number of parallel workers for async mode.')
    parser.add_argument('--product-id', help='Print similar-product suggestions for this product instead of a report.')
    return parser


def engine_config_from_args(args: argparse.Namespace, base: EngineConfig) -> EngineConfig:
    """Apply command-line overrides on top of the environment-derived settings.

    Without an explicit cap from the flag or the environment the command caps
    input at ``CLI_MAX_PRODUCTS``.
    """
    overrides = {
        "exact_min_length": args.min_length,
        "similar_threshold": args.similar_threshold,
        "template_threshold": args.template_threshold,
        "max_products": args.max_products,
        "async_max_workers": args.workers,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.max_products is None and not base.max_products:
        overrides["max_products"] = CLI_MAX_PRODUCTS
    if not overrides:
        return base
    return EngineConfig(**{**base.model_dump(), **overrides})


def load_products(path: str) -> Any:
    if path == '-':
        data = json.load(sys.stdin)
    else:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    if isinstance(data, dict) and 'products' in data:
        return data['products']
    return data


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    config = reload_config()

    try:
        engine = engine_config_from_args(args, config.engine)
    except ValidationError as e:
        log_error("Invalid command-line settings", error=str(e))
        return 2

    configure_logging(config.logging.level, config.logging.format, config.logging.max_context_length)
    config.log_configuration()
    for issue in config.validate_configuration():
        log_warning("Configuration warning", issue=issue)

    try:
        products = load_products(args.input)
    except (OSError, json.JSONDecodeError) as e:
        log_error("Failed to read product export", path=args.input, error=str(e))
        return 1

    try:
        if args.product_id:
            result = suggest_similar_products(products, args.product_id, engine).to_dict()
        elif args.async_enabled:
            result = asyncio.run(analyze_async(products, engine)).to_dict()
        else:
            result = analyze(products, engine).to_dict()
    except DuplicateContentError as e:
        log_error("Analysis failed", error=str(e))
        return 1

    payload = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(payload + "\n")
        log_analysis_progress("Result written", path=args.output)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
