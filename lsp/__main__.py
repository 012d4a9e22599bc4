#!/usr/bin/env python3
# Entry point for LSP server: python3 -m lsp

import logging
import sys

from lsp.server import server


def main() -> None:
    # stdout carries the protocol, log to stderr
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)
    server.start_io()


if __name__ == "__main__":
    main()
