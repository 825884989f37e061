"""CLI for probing sources: print each source's normalized descriptor.

Usage:
    duetcompose probe left.mp4 right.mp4
"""

import argparse

from .media import FFmpegRetriever, describe, extract


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="duetcompose probe",
        description="Print display size, aspect ratio and duration of sources.",
    )
    parser.add_argument(
        "sources", nargs="+",
        help="Video files to probe",
    )
    parsed = parser.parse_args(args)

    retriever = FFmpegRetriever()
    for source in parsed.sources:
        print(describe(extract(source, retriever)))


if __name__ == "__main__":
    main()
