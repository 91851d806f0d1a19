"""
Module entry point for: python -m exam_parser

Allows running the parser directly as a module:
    python -m exam_parser parse <text_file> [options]
    python -m exam_parser validate <json_file> [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
