#!/usr/bin/env python3
"""
rpcxml - Command-line driver

Performs a single XML-RPC call and prints the outcome.

Usage Examples:
    # Call a method with one string parameter
    python main.py --destination http://localhost:8080/RPC2 getQuote string:IBM

    # Untyped parameters are sent as strings
    python main.py --destination http://localhost:8080/RPC2 echo "Hello, World!"

    # Method names with dashes, written with underscores
    python main.py --destination http://localhost:8080/RPC2 --underscore-is - get_quote string:IBM

    # Print the timing trace and the request document
    python main.py --destination http://localhost:8080/RPC2 --trace --xml-format 1 getQuote string:IBM
"""

import argparse
import base64
import json
import logging
import os
import sys
from typing import Any, List, Optional

from rpcxml.config import config
from rpcxml.core import ARRAY, NIL, STRING, STRUCT, VALUE_TYPES, Value, to_python
from rpcxml.communication import (
    ConfigurationError, MalformedResponseError, RPCError, XMLRPCClient, print_trace
)


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ERROR = 2


class XMLRPCCallDriver:
    """Main driver for one-off XML-RPC calls."""

    def __init__(self, verbose: bool = False):
        """Initialize the driver."""
        self.logger = self._setup_logging(verbose)

    def _setup_logging(self, verbose: bool) -> logging.Logger:
        """Setup logging configuration."""
        handlers = [logging.StreamHandler()]
        if config.logging.enable_file_logging:
            log_dir = os.path.dirname(config.logging.log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(config.logging.log_file_path))

        logging.basicConfig(
            level=logging.DEBUG if verbose else getattr(logging, config.logging.level.upper(), logging.INFO),
            format=config.logging.format,
            handlers=handlers
        )
        return logging.getLogger(__name__)

    @staticmethod
    def parse_params(items: List[str]) -> List[Any]:
        """
        Turn TYPE:VALUE command-line words into interleaved call arguments.

        A word without a known type prefix is sent as a string; "nil:" sends
        an empty nil value and base64 values are taken as UTF-8 text.
        """
        params = []
        for item in items:
            value_type, separator, raw = item.partition(":")
            if not separator or value_type not in VALUE_TYPES or value_type in (STRUCT, ARRAY):
                params.extend([STRING, item])
            elif value_type == NIL:
                params.extend([NIL, None])
            else:
                params.extend([value_type, raw])
        return params

    def run(self, args) -> int:
        """Perform the call described by the command-line arguments."""
        headers = []
        for header in args.header or []:
            name, _, value = header.partition(":")
            headers.append((name.strip(), value.strip()))

        try:
            client = XMLRPCClient(
                destination=args.destination,
                xml_format=args.xml_format,
                http_header=headers,
                underscore_replacement=args.underscore_is,
                timeout_seconds=args.timeout
            )
            method = client.wire_name(args.method)
            status, value, trace = client.call(method, *self.parse_params(args.params))

        except ConfigurationError as e:
            self.logger.error(f"Configuration error: {e}")
            return EXIT_ERROR
        except MalformedResponseError as e:
            self.logger.error(f"Malformed response: {e}")
            if args.trace and e.trace is not None:
                print_trace(e.trace)
            return EXIT_ERROR
        except RPCError as e:
            self.logger.error(f"Call failed: {e}")
            return EXIT_ERROR

        if args.trace:
            sys.stderr.write(trace.request.body.decode("utf-8", "replace") + "\n")
            print_trace(trace)

        print(json.dumps({"status": status, "value": plain_payload(value, trace.value_type)}, indent=2, default=_json_default))
        return EXIT_SUCCESS if status == 0 else EXIT_FAILURE


def plain_payload(payload: Any, value_type: Optional[str] = None) -> Any:
    """Unwrap a decoded payload of the given type into data json can print."""
    if value_type in (STRUCT, ARRAY):
        return to_python(Value(value_type, payload))
    return payload


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    return str(obj)


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Call a procedure on an XML-RPC server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--destination',
        default=None,
        help='URL of the XML-RPC server (default: XMLRPC_DESTINATION)'
    )

    parser.add_argument(
        '--xml-format',
        type=int,
        choices=[0, 1],
        default=None,
        help='0 for compact documents, 1 for indented ones'
    )

    parser.add_argument(
        '--underscore-is',
        default=None,
        help='Replacement for every underscore in the method name'
    )

    parser.add_argument(
        '--header',
        action='append',
        help='Extra HTTP header as NAME:VALUE (repeatable)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Request timeout in seconds'
    )

    parser.add_argument(
        '--trace',
        action='store_true',
        help='Print the request document and call timings to stderr'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument('method', help='Remote procedure name')
    parser.add_argument('params', nargs='*', help='Parameters as TYPE:VALUE')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)
    driver = XMLRPCCallDriver(verbose=args.verbose)

    try:
        return driver.run(args)
    except KeyboardInterrupt:
        return EXIT_ERROR
    except Exception:
        logging.exception("Fatal error occurred")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
