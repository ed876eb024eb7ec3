"""Argument parsing functionality for brewver."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="brewver",
        description="Installs a specific version of a Homebrew formula",
        add_help=True,
    )

    parser.add_argument("formula_name",
                        help="The name of the formula",
                        type=str)
    parser.add_argument("formula_version",
                        help="The version of the formula",
                        type=str)

    parser.add_argument("--version",
                        action="version",
                        version=f"%(prog)s {Constants.VERSION}")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
