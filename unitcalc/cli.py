#!/usr/bin/env python3
"""
Command-line front end for the unit calculator.

Usage:
    unitcalc 5 ft + 2m                  # evaluate once and exit
    unitcalc "100 EUR to HUF"
    unitcalc                            # interactive prompt
    python -m unitcalc.cli --debug 1 pint to gallon

In the interactive prompt an incomplete expression continues on the next
line (the prompt changes from ">> " to ".. "). Ctrl-C or Ctrl-D drops a
pending expression, or quits when there is none. Evaluated expressions are
kept in a history file between sessions.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import unitcalc
import unitcalc.utils.util as du
from unitcalc.calculator.calc_exceptions import CalcError
from unitcalc.calculator.node import Node, evaluate
from unitcalc.config.configuration_manager import ConfigurationManager
from unitcalc.currency.mnb_rate_provider import MnbRateProvider
from unitcalc.currency.rate_provider import RateProvider
from unitcalc.parser.lexer import Lexer
from unitcalc.parser.parser import Parser

PROMPT          = ">> "
PROMPT_CONTINUE = ".. "


def parse_args( argv: Optional[List[str]] = None ) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="unitcalc",
        description="Unit-aware calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One-shot evaluation
  unitcalc 5 ft + 2m
  unitcalc 15 C to F

  # Currency, rates from the Hungarian National Bank
  unitcalc 100 EUR to USD

  # Show the parsed tree, plus debug logging
  unitcalc --debug "2^3^2"

  # Override configuration keys
  unitcalc --set cache_dir=/tmp/unitcalc 1 usd to huf

  # Interactive prompt
  unitcalc
        """
    )

    parser.add_argument(
        "expression",
        nargs="*",
        help="Expression to evaluate; starts the interactive prompt when omitted"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="INI configuration file (default: $UNITCALC_CONFIG_PATH, else the packaged unitcalc.ini)"
    )

    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a configuration key; may be repeated"
    )

    parser.add_argument(
        "--offline",
        action="store_true",
        help="Disable currency rates (currency conversions fail)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the parsed tree before each result and enable debug logging"
    )

    return parser.parse_args( argv )


def build_rate_provider( config_mgr: ConfigurationManager, offline: bool = False, debug: bool = False ) -> Optional[RateProvider]:
    """
    Create the currency rate provider the evaluator is handed.

    Ensures:
        - Returns None when offline
        - Returns an MnbRateProvider configured from config_mgr otherwise;
          nothing is fetched until a currency conversion needs it
    """
    if offline:
        return None
    return MnbRateProvider.from_config( config_mgr, debug=debug )


def print_result( node: Node, rates: Optional[RateProvider], debug: bool = False ) -> bool:
    """
    Evaluate a parsed tree and print the value, or the error message.

    Ensures:
        - Returns True when evaluation succeeded, False on a CalcError
        - Other exceptions propagate
    """
    if debug: print( node )

    try:
        print( evaluate( node, rates ) )
        return True
    except CalcError as e:
        print( e )
        return False


def run_once( text: str, rates: Optional[RateProvider], debug: bool = False ) -> int:
    """
    Evaluate one line of text.

    Ensures:
        - Prints nothing when text does not parse
        - Returns the process exit code: 0 on success or no parse, 1 on a CalcError
    """
    parser = Parser( Lexer().tokenize( text ) )
    node   = parser.parse()

    if node is None:
        return 0

    return 0 if print_result( node, rates, debug=debug ) else 1


def _load_history( readline, history_path: str ) -> None:
    if not os.path.exists( history_path ):
        return
    try:
        readline.read_history_file( history_path )
    except OSError as e:
        logging.getLogger( __name__ ).warning( f"Could not read history file {history_path}: {e}" )


def _save_history( readline, history_path: str ) -> None:
    try:
        os.makedirs( os.path.dirname( history_path ) or ".", exist_ok=True )
        readline.write_history_file( history_path )
    except OSError as e:
        logging.getLogger( __name__ ).warning( f"Could not write history file {history_path}: {e}" )


def run_repl( rates: Optional[RateProvider], history_path: Optional[str] = None, debug: bool = False ) -> int:
    """
    Interactive read-eval-print loop with line continuation.

    Requires:
        - history_path, when given, is a writable file path

    Ensures:
        - Lines accumulate until the buffer parses as one expression
        - Each evaluated expression becomes one history entry
        - Returns 0 when the user quits
    """
    import readline

    readline.set_auto_history( False )
    if history_path: _load_history( readline, history_path )

    lexer  = Lexer()
    parser = Parser( debug=debug )
    lines  = []

    if debug: du.print_banner( f"unitcalc {unitcalc.__version__}, Ctrl-D to quit", end="\n" )

    while True:
        try:
            line = input( PROMPT if parser.is_empty() else PROMPT_CONTINUE )
        except ( KeyboardInterrupt, EOFError ):
            print()
            if parser.is_empty():
                break
            # drop the pending expression, stay in the loop
            lines.clear()
            parser.reset()
            continue

        if not line.strip():
            continue

        lines.append( line.strip() )
        parser.extend( lexer.tokenize( line ) )

        node = parser.parse()
        if node is None:
            continue

        print_result( node, rates, debug=debug )
        readline.add_history( " ".join( lines ) )

        lines.clear()
        parser.reset()

    if history_path: _save_history( readline, history_path )

    return 0


def main( argv: Optional[List[str]] = None ) -> int:
    """Main entry point."""
    args = parse_args( argv )

    config_mgr = ConfigurationManager(
        config_path=args.config,
        cli_args=du.get_name_value_pairs( args.set ),
        debug=args.debug
    )
    debug = args.debug or config_mgr.get( "app_debug", default=False, return_type="boolean" )

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    rates = build_rate_provider( config_mgr, offline=args.offline, debug=debug )

    if args.expression:
        return run_once( " ".join( args.expression ), rates, debug=debug )

    history_path = du.expand_path( config_mgr.get( "history_file", default="" ) ) or None
    return run_repl( rates, history_path=history_path, debug=debug )


if __name__ == "__main__":
    sys.exit( main() )
