#!/usr/bin/env python3
# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point for validating YAML and JSON documents."""

import argparse
import dataclasses
import json
import logging
import sys
from typing import List

from .config import ValidatorConfig
from .validation import ValidationResult, find_document_files, validate_files

logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> ValidatorConfig:
    """Apply command-line flags on top of the environment configuration."""
    config = ValidatorConfig.from_env()
    overrides = {}
    if args.allow_empty_file:
        overrides['is_empty_file_allowed'] = True
    if args.no_detect_duplicate_keys:
        overrides['detect_duplicate_keys'] = False
    if args.allow_json_comments:
        overrides['allow_json_comments'] = True
    if args.allow_trailing_comma:
        overrides['allow_trailing_comma'] = True
    if args.check_formats:
        overrides['check_formats'] = True
    if args.schema_path:
        overrides['schema_search_paths'] = config.schema_search_paths + tuple(args.schema_path)
    if args.log_level:
        overrides['log_level'] = args.log_level
    return dataclasses.replace(config, **overrides)


def _first_line(message: str) -> str:
    return message.splitlines()[0] if message else message


def print_results(results: List[ValidationResult], output_format: str, show_items: bool = False) -> None:
    if output_format == 'json':
        output = {
            'files': len(results),
            'errors': sum(1 for r in results if r.has_error()),
            'results': [
                {
                    'file': str(r.source),
                    'valid': not r.has_error(),
                    'messages': r.messages,
                    **({'items': r.items} if show_items else {}),
                }
                for r in results
            ],
        }
        print(json.dumps(output, indent=2))
    elif output_format == 'github-actions':
        for result in results:
            if not result.has_error():
                continue
            for message in result.messages or ["validation failed"]:
                print(f"::error file={result.source}::{_first_line(message)}")
    else:  # human-readable
        for result in results:
            if result.has_error():
                print(f"\n{result.source}:")
                for message in result.messages:
                    print(f"  ERROR: {message}")
            if show_items and result.items:
                print(f"\n{result.source} items:")
                for path, value in result.items.items():
                    print(f"  {path} = {value}")


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the validator CLI."""
    parser = argparse.ArgumentParser(
        description='Validate YAML and JSON documents against a JSON Schema',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to validate (default: current directory)',
    )
    parser.add_argument('--schema', help='JSON Schema file the documents must conform to')
    parser.add_argument(
        '--schema-path',
        action='append',
        default=[],
        help='Directory serving classpath: schema references (repeatable)',
    )
    parser.add_argument('--allow-empty-file', action='store_true', help='Treat empty files as valid')
    parser.add_argument(
        '--no-detect-duplicate-keys',
        action='store_true',
        help='Accept documents with duplicate object keys',
    )
    parser.add_argument('--allow-json-comments', action='store_true', help='Permit comments in JSON')
    parser.add_argument('--allow-trailing-comma', action='store_true', help='Permit trailing commas in JSON')
    parser.add_argument('--check-formats', action='store_true', help='Assert JSON Schema format keywords')
    parser.add_argument('--show-items', action='store_true', help='Print the flattened document items')
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument('--log-level', help='Log level (default: from environment, else INFO)')

    args = parser.parse_args(argv)

    if not args.paths:
        args.paths = ['.']

    config = build_config(args)
    if args.format == 'human':
        config.set_logging()
    else:
        # stdout carries the report, every log record goes to stderr
        config.set_logging(stdout=sys.stderr)

    documents = find_document_files(args.paths)
    if not documents:
        logger.error("No YAML or JSON documents found.")
        sys.exit(1)

    results = validate_files(documents, schema_path=args.schema, config=config)
    print_results(results, args.format, show_items=args.show_items)

    # Exit with error code if any document failed
    if any(r.has_error() for r in results):
        sys.exit(1)
    if args.format == 'human':
        print(f"Validation succeeded for {len(results)} file(s).")
    sys.exit(0)


if __name__ == '__main__':
    main()
