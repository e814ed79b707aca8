import configparser
import os
from typing import Optional, Union, Any, Callable

import unitcalc.utils.util as du

ENV_VAR_NAME        = "UNITCALC_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "/conf/unitcalc.ini"

_NO_DEFAULT = "@@@_None_@@@"


# Idea for the "singleton" decorator: https://stackabuse.com/creating-a-singleton-in-python/
def singleton( cls: type ) -> Callable[..., Any]:
    """
    Decorator that implements the Singleton pattern.

    Requires:
        - cls is a valid class type

    Ensures:
        - Only one instance of cls is created
        - All calls return the same instance
        - Passing _reset_singleton=True discards the existing instance first
        - Provides a reset method for testing
    """

    instances = { }

    def wrapper( *args: Any, **kwargs: Any ) -> Any:

        # Check for the special _reset_singleton flag for testing
        if kwargs.pop( "_reset_singleton", False ):
            instances.pop( cls, None )

        if cls not in instances:
            if kwargs.get( "debug", False ): print( "Instantiating ConfigurationManager() singleton...", end="\n\n" )
            instances[ cls ] = cls( *args, **kwargs )
        else:
            if instances[ cls ].debug:
                print( "Reusing ConfigurationManager() singleton..." )

        return instances[ cls ]

    # Add reset method to the wrapper function itself
    def reset_for_testing():
        """Reset the singleton instance for testing purposes"""
        if cls in instances:
            del instances[ cls ]
            return True
        return False

    wrapper.reset_for_testing = reset_for_testing

    return wrapper


@singleton
class ConfigurationManager():
    """
    Manages calculator configuration read from an INI file.

    Keys are looked up in the selected block, which inherits every key of
    the [default] block it does not set itself. Command line overrides are
    applied last.
    """

    def __init__( self, config_path: Optional[str]=None, config_block_id: str="default", env_var_name: str=ENV_VAR_NAME,
                  debug: bool=False, verbose: bool=False, silent: bool=True, cli_args: Optional[dict[str, str]]=None ) -> None:
        """
        Initialize the configuration manager.

        Requires:
            - config_path, when given, names an existing INI file

        Ensures:
            - The path is config_path, else the file named by env_var_name,
              else the INI file shipped inside the package
            - Defaults are applied, then CLI overrides

        Raises:
            - FileNotFoundError if the resolved path doesn't exist
            - AssertionError if config_block_id doesn't exist in configuration
        """
        self.debug           = debug
        self.verbose         = verbose
        self.silent          = silent

        if config_path is None and os.environ.get( env_var_name ):
            config_path = os.environ[ env_var_name ]
            if self.debug: print( f"Using [{env_var_name}] to locate the configuration file" )

        if config_path is None:
            config_path = du.get_package_root() + DEFAULT_CONFIG_PATH

        self.config_path     = du.expand_path( config_path.strip() )
        self.config_block_id = config_block_id

        # set by call below
        self.config          = None

        self.init( cli_args=cli_args )

    def init( self, config_block_id: Optional[str]=None, cli_args: Optional[dict[str, str]]=None ) -> None:
        """
        Initialize or reinitialize the configuration.

        Requires:
            - self.config_path is an existing file

        Ensures:
            - Configuration is (re)loaded from self.config_path
            - Default values are applied
            - CLI overrides are processed

        Raises:
            - FileNotFoundError if the path doesn't exist
            - AssertionError if config_block_id not found
        """
        if not os.path.isfile( self.config_path ):
            raise FileNotFoundError( f"Configuration file not found: [{self.config_path}]" )

        if not self.silent:
            du.print_banner( f"Initializing configuration_manager [{self.config_path}]", prepend_nl=True, end="\n" )

        self.config = configparser.ConfigParser()
        if config_block_id is not None:
            self.config_block_id = config_block_id

        self.config.read( self.config_path, encoding="utf-8" )

        self._sanity_check_config_block( "default" )
        self._sanity_check_config_block( self.config_block_id )

        if self.debug and self.verbose and not self.silent:
            print( "Path:", self.config_path )
            print( "Block ID:", self.config_block_id, end="\n\n" )

        self._calculate_defaults()
        self._override_configuration( cli_args )

    def _override_configuration( self, cli_args: Optional[dict[str, str]] ) -> None:
        """
        Override configuration values with CLI arguments.

        Requires:
            - cli_args is None or a dictionary of key-value pairs

        Ensures:
            - Configuration values in the current block are updated
            - config_path and config_block_id are not overridden (immutable)
        """

        # overwrite current configuration values if the cli_args {} has anything to add...
        if cli_args is not None and len( cli_args ) > 0:

            for key in cli_args.keys():

                # ...but don't override config_path and config_block_id, they're immutable
                if key != "config_path" and key != "config_block_id":

                    if not self.silent: print( "Overriding [{0}] with [{1}]".format( key, cli_args[ key ] ) )
                    self.set_config( key, cli_args[ key ] )

                elif not self.silent:
                    print( "Skipping override of [{0}], it's immutable".format( key ) )

        else:

            if self.debug: print( "Skipping cli_args processing" )

    def _calculate_defaults( self ) -> None:
        """
        Apply default values to the current configuration block.

        Ensures:
            - All keys from 'default' section are added to current block
            - Existing keys in current block are not overwritten
            - Nothing happens if current block is 'default'
        """

        # All configurations get default values, except for the default config
        if self.config_block_id == "default": return

        block_keys = self.config.options( self.config_block_id )

        for key in self.config.options( "default" ):

            if key in block_keys: continue

            if self.debug and self.verbose: print( "Inserting default key [{0}] = [{1}] into [{2}]".format( key, self.config.get( "default", key ), self.config_block_id ) )
            self.config.set( self.config_block_id, key, self.config.get( "default", key, raw=True ) )

    def _sanity_check_config_block( self, block_id: str ) -> None:

        fail_msg = "Configuration block doesn't exist: [{0}] Check spelling?".format( block_id )
        assert block_id in self.config.sections(), fail_msg

    def set_config( self, config_key: str, value: Any ) -> None:
        """
        Set or update a configuration value in the current block.

        Ensures:
            - Value is converted to string before storage
            - Existing values are overwritten
        """
        self.config.set( self.config_block_id, config_key, str( value ) )

    def exists( self, config_key: str ) -> bool:
        # Key must be forced to lowercase because configparser lowercases all keys internally
        return config_key.lower() in self.config.options( self.config_block_id )

    def get( self, key: str, default: Union[str, int, float, bool]=_NO_DEFAULT, silent: bool=True, return_type: str="string" ) -> Optional[Union[str, int, float, bool]]:
        """
        Get a configuration value with optional type conversion.

        Requires:
            - return_type is one of: 'boolean', 'float', 'int', 'string'

        Ensures:
            - Returns typed value if key exists
            - Returns typed default if key doesn't exist and default provided
            - Returns None if key doesn't exist and no default

        Raises:
            - ValueError if return_type is invalid or the value doesn't convert
        """
        if self.exists( key ):

            value = self.config.get( self.config_block_id, key )

            return self._get_typed_value( value, return_type )

        # If there's a default specified, then return it
        if default != _NO_DEFAULT:

            if not silent: du.print_banner( "Key [{0}] NOT found, returning default [{1}]".format( key, default ), end="\n" )

            return self._get_typed_value( default, return_type )

        if not silent: du.print_banner( "Key [{0}] NOT found".format( key ), end="\n", prepend_nl=True )

        return None

    def _get_typed_value( self, value: Any, return_type: str ) -> Union[str, int, float, bool]:
        """
        Convert a configuration value to the requested type.

        Ensures:
            - Handles boolean conversion from 'True' / 'true' / 'yes' / '1'

        Raises:
            - ValueError if return_type is invalid
            - Type conversion errors for the specific type
        """
        # Force return type to lowercase
        return_type = return_type.lower()

        if return_type == "boolean":
            # Allow the default value to be passed in as a Boolean or as a string
            if isinstance( value, bool ): return value
            return str( value ).strip().lower() in ( "true", "yes", "1" )
        elif return_type == "float":
            return float( value )
        elif return_type.startswith( "int" ):
            return int( value )
        elif return_type.startswith( "str" ):
            return value
        else:
            raise ValueError( f"Return type [{return_type}] is invalid.  Accepts: 'boolean', 'float', 'int' and 'string'" )


def quick_smoke_test():
    """Quick smoke test to validate ConfigurationManager functionality."""
    du.print_banner( "ConfigurationManager Smoke Test", prepend_nl=True )

    config_mgr = ConfigurationManager( silent=False, _reset_singleton=True )

    print( "app_debug    :", config_mgr.get( "app_debug", default=False, return_type="boolean" ) )
    print( "timeout secs :", config_mgr.get( "currency_request_timeout_secs", return_type="float" ) )
    print( "missing key  :", config_mgr.get( "no_such_key", silent=False ) )

    config_mgr = ConfigurationManager( cli_args={ "currency_base": "EUR" }, silent=False, _reset_singleton=True )
    print( "override     :", config_mgr.get( "currency_base" ) )

    ConfigurationManager.reset_for_testing()


if __name__ == "__main__":
    quick_smoke_test()
