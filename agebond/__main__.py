"""Entry point for running the AgeBond server as a module.

Usage:
    python -m agebond --family-file /path/to/family.json
    agebond-server --family-file /path/to/family.json
"""

import argparse
import logging
import os


def main():
    """Main entry point for the AgeBond MCP server."""
    parser = argparse.ArgumentParser(
        description="AgeBond MCP Server - Age relationships within a family via MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  agebond-server --family-file ~/family.json
  agebond-server -f ~/family.json --today 2024-06-15

Environment variables:
  AGEBOND_FAMILY_FILE   Path to the family JSON file (created on first save)
  AGEBOND_TODAY         Date to treat as today, YYYY-MM-DD (default: system date)
  AGEBOND_QUERY_MODEL   LiteLLM model for natural language questions
""",
    )
    parser.add_argument(
        "--family-file",
        "-f",
        metavar="PATH",
        help="Path to family JSON file (or set AGEBOND_FAMILY_FILE env var)",
    )
    parser.add_argument(
        "--today",
        "-t",
        metavar="DATE",
        help="Date to treat as today, e.g. 2024-06-15 (or set AGEBOND_TODAY env var)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # CLI args override env vars
    if args.family_file:
        os.environ["AGEBOND_FAMILY_FILE"] = args.family_file
    if args.today:
        os.environ["AGEBOND_TODAY"] = args.today

    # Import and initialize AFTER setting env vars
    from . import initialize, mcp

    initialize()
    mcp.run()


if __name__ == "__main__":
    main()
