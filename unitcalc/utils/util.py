import os
from datetime import datetime as dt
from datetime import timedelta as td
from typing import Optional

import pytz


def get_current_datetime_raw( tz_name: str = "Europe/Budapest", days_offset: int = 0 ) -> dt:
    """
    Get a datetime object for the current time in a specified timezone with optional offset.

    Requires:
        - tz_name is a valid timezone string recognized by pytz
        - days_offset is an integer (positive or negative)

    Ensures:
        - Returns a timezone-aware datetime in the specified timezone
        - The datetime is offset by the specified number of days from the current time

    Raises:
        pytz.exceptions.UnknownTimeZoneError: If tz_name is not a valid timezone
    """
    now     = dt.now( pytz.utc )
    now     = now + td( days=days_offset )
    tz      = pytz.timezone( tz_name )
    tz_date = now.astimezone( tz )

    return tz_date


def get_current_date( tz_name: str = "Europe/Budapest", offset: int = 0 ) -> str:
    """
    Get the current date in the specified timezone as YYYY-MM-DD.

    Raises:
        pytz.exceptions.UnknownTimeZoneError: If tz_name is not a valid timezone
    """
    tz_date = get_current_datetime_raw( tz_name, days_offset=offset )

    return tz_date.strftime( "%Y-%m-%d" )


def get_name_value_pairs( arg_list: list[str], debug: bool=False ) -> dict[str, str]:
    """
    Parses a list of strings -- name=value -- into dictionary format { "name":"value" }

    Requires:
        - arg_list is a list of strings

    Ensures:
        - Returns dictionary mapping names to values
        - Only processes strings containing "=", splitting on the first one
    """
    name_value_pairs = { }

    for i, arg in enumerate( arg_list ):

        if debug: print( "[{0}]th arg = [{1}]... ".format( i, arg ), end="" )

        if "=" in arg:
            name, value = arg.split( "=", 1 )
            name_value_pairs[ name.strip() ] = value.strip()
            if debug: print( "done!" )
        else:
            if debug: print( "SKIPPING, name=value format not found" )

    return name_value_pairs


def get_package_root() -> str:
    """
    Get the directory of the installed unitcalc package.

    Ensures:
        - Returns an absolute path without a trailing slash
    """
    return os.path.dirname( os.path.dirname( os.path.abspath( __file__ ) ) )


def get_file_as_string( path: str ) -> str:
    """
    Read a file and return its contents as a string.

    Raises:
        FileNotFoundError: If the file does not exist
        PermissionError: If the file cannot be read due to permissions
    """
    with open( path, "r", encoding="utf-8" ) as file:
        return file.read()


def write_string_to_file( path: str, string: str ) -> None:
    """
    Write a string to a file, creating parent directories as needed.

    Ensures:
        - Overwrites existing file if present
    """
    parent = os.path.dirname( path )
    if parent: os.makedirs( parent, exist_ok=True )

    with open( path, "w", encoding="utf-8" ) as outfile:
        outfile.write( string )


def print_banner( msg: str, expletive: bool = False, chunk: str = "¡@#!-$?%^_¿",
                  end: str = "\n\n", prepend_nl: bool = False ) -> None:
    """
    Print a message to console with decorative header/footer lines.

    Requires:
        - msg is a string to display in the banner
        - chunk is a string used for decoration in expletive mode

    Ensures:
        - Prints the message with decorative lines above and below
        - Uses expletive decoration style if expletive=True
        - Prepends a newline if prepend_nl=True
    """
    if prepend_nl: print()

    max_len = 80
    bar_str = ""
    if expletive:
        while len( bar_str ) < max_len:
            bar_str += chunk
    else:
        bar_str = "-" * max_len

    print( bar_str )
    if expletive:
        print( chunk )
        print( chunk, msg )
        print( chunk )
    else:
        print( "-", msg )
    print( bar_str, end=end )


def expand_path( path: Optional[str] ) -> Optional[str]:
    """Expand ~ and environment variables; None passes through."""
    if path is None: return None
    return os.path.expandvars( os.path.expanduser( path ) )
