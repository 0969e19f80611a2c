#!/usr/bin/env python
"""
Command-line interface for the Overpass client

Usage:
    overpass-graph query "[out:json];node(1);out;"
    overpass-graph decode --input response.xml --query-file query.overpassql
"""

import os
import sys
import json
import argparse
from typing import Any, Dict, List, Optional

from loguru import logger

from .api_client import Client
from .exceptions import OverpassError
from .models import Result
from .parser import decode


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def summarize(result: Result) -> Dict[str, Any]:
    """Summary of a decoded result, suitable for JSON output"""
    summary = {
        "timestamp": result.timestamp.isoformat() if result.timestamp else None,
        "count": result.count,
        "nodes": len(result.nodes),
        "ways": len(result.ways),
        "relations": len(result.relations),
    }
    if result.remark:
        summary["remark"] = result.remark
    if result.is_diff:
        for name, diff in (("create", result.create), ("modify", result.modify), ("delete", result.delete)):
            summary[name] = {
                "nodes": len(diff.nodes) if diff else 0,
                "ways": len(diff.ways) if diff else 0,
                "relations": len(diff.relations) if diff else 0,
            }
    return summary


def cmd_query(args):
    """Run a query against the Overpass API"""
    setup_logging(args.verbose)

    client = Client(api_endpoint=args.endpoint, timeout=args.timeout)
    try:
        result = client.query(args.query)
    except OverpassError as e:
        logger.error(f"Query failed: {e}")
        return 1

    print(json.dumps(summarize(result), indent=2))
    return 0


def cmd_decode(args):
    """Decode a saved Overpass response"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    query = args.query or ""
    if args.query_file:
        with open(args.query_file, "r", encoding="utf-8") as f:
            query = f.read()

    with open(args.input, "rb") as f:
        body = f.read()

    try:
        result = decode(body, query)
    except OverpassError as e:
        logger.error(f"Failed to decode {args.input}: {e}")
        return 1

    logger.info(f"Decoded {args.input}: {result.count} elements")
    print(json.dumps(summarize(result), indent=2))
    return 0


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Overpass API client CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Run a query:
    overpass-graph query "[out:json];relation(1673881);>>;out body;"

  Decode a saved response:
    overpass-graph decode --input response.json --query "[out:json]"
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Query command
    query_parser = subparsers.add_parser("query", help="Run an Overpass QL query")
    query_parser.add_argument("query", help="Overpass QL query text")
    query_parser.add_argument("--endpoint", "-e", help="Interpreter URL (default from config)")
    query_parser.add_argument("--timeout", "-t", type=float, help="Request timeout in seconds")
    query_parser.set_defaults(func=cmd_query)

    # Decode command
    decode_parser = subparsers.add_parser("decode", help="Decode a saved response file")
    decode_parser.add_argument("--input", "-i", required=True, help="Response body file")
    decode_parser.add_argument("--query", "-q", help="Query text the response was produced by")
    decode_parser.add_argument("--query-file", help="File holding the query text")
    decode_parser.set_defaults(func=cmd_decode)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
