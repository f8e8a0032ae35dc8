"""
Command line entry point.

Usage:
    tagclusters add-top-clusters   # classify triples into their top clusters
    tagclusters add-misc-cluster   # assign "Misc" to unclassified triples
    tagclusters add-full-text      # load document text from source files

The database location comes from DB_PATH (environment or .env).
"""

import argparse
from typing import List, Optional

from tagclusters.migrations import add_document_full_text, add_misc_cluster, add_top_cluster_ids

COMMANDS = {
    "add-top-clusters": add_top_cluster_ids.main,
    "add-misc-cluster": add_misc_cluster.main,
    "add-full-text": add_document_full_text.main,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagclusters",
        description="Idempotent migrations for triple tag clusters and document text",
    )
    parser.add_argument(
        "command",
        choices=sorted(COMMANDS),
        help="Migration to run",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and run the selected migration."""
    args = build_parser().parse_args(argv)
    COMMANDS[args.command]()


if __name__ == "__main__":
    main()
