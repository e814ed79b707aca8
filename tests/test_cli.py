#!/usr/bin/env python3
"""
Unit tests for the command-line front end.

Run with: pytest -v tests/test_cli.py
"""

import sys
from unittest.mock import Mock, call, patch

import pytest

from unitcalc import cli
from unitcalc.calculator.rational import Rational
from unitcalc.config.configuration_manager import ConfigurationManager
from unitcalc.currency.mnb_rate_provider import MnbRateProvider
from unitcalc.currency.rate_provider import StaticRateProvider


@pytest.fixture( autouse=True )
def fresh_singleton( reset_config ):
    yield


def scripted_input( script, prompts ):
    """Stand-in for input(): records each prompt and replays script, raising exception entries."""
    lines = iter( script )

    def fake_input( prompt="" ):
        prompts.append( prompt )
        item = next( lines )
        if isinstance( item, BaseException ) or ( isinstance( item, type ) and issubclass( item, BaseException ) ):
            raise item
        return item

    return fake_input


class TestOneShot:
    """Tests for evaluating expressions given on the command line."""

    def test_prints_result( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--offline", "1", "+", "2" ] ) == 0
        assert capsys.readouterr().out == "3\n"

    def test_units( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--offline", "1 pint to gallon" ] ) == 0
        assert capsys.readouterr().out == "0.125gallon\n"

    def test_error_message_and_status( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--offline", "1/0" ] ) == 1
        assert capsys.readouterr().out == "Division by zero\n"

    def test_incomplete_expression_prints_nothing( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--offline", "1", "+" ] ) == 0
        assert capsys.readouterr().out == ""

    def test_debug_prints_tree( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--offline", "--debug", "1+2" ] ) == 0
        out = capsys.readouterr().out
        assert "(1+2)" in out
        assert out.rstrip().endswith( "3" )

    def test_set_overrides_config( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--set", "app_debug=true", "--offline", "2*3" ] ) == 0
        assert "(2*3)" in capsys.readouterr().out

    def test_offline_currency_fails( self, config_file, capsys ):
        assert cli.main( [ "--config", config_file, "--offline", "100 EUR to HUF" ] ) == 1
        assert "Conversion error" in capsys.readouterr().out

    def test_run_once_with_provider( self, capsys ):
        rates = StaticRateProvider( { "EUR": Rational( 400 ) } )

        assert cli.run_once( "100 EUR to HUF", rates ) == 0
        assert capsys.readouterr().out == "40kHUF\n"


class TestRateProviderSelection:
    """Tests for choosing the rate provider."""

    def test_offline( self, config_file ):
        config_mgr = ConfigurationManager( config_path=config_file )
        assert cli.build_rate_provider( config_mgr, offline=True ) is None

    def test_online_uses_config( self, config_file, tmp_path ):
        config_mgr = ConfigurationManager( config_path=config_file )
        provider   = cli.build_rate_provider( config_mgr )

        assert isinstance( provider, MnbRateProvider )
        assert provider.cache_path == str( tmp_path / "cache" / "rates.xml" )
        assert provider.timeout_secs == 2.5


class TestRepl:
    """Tests for the interactive prompt."""

    def test_continuation_interrupt_and_history( self, capsys ):
        readline = Mock()
        prompts  = []
        script   = [ "1 +", "2", "", "5 *", KeyboardInterrupt, "7", EOFError ]

        with patch.dict( sys.modules, { "readline": readline } ), \
             patch( "builtins.input", side_effect=scripted_input( script, prompts ) ):
            assert cli.run_repl( None ) == 0

        assert prompts == [ ">> ", ".. ", ">> ", ">> ", ".. ", ">> ", ">> " ]
        assert readline.add_history.call_args_list == [ call( "1 + 2" ), call( "7" ) ]
        readline.set_auto_history.assert_called_once_with( False )

        printed = [ line for line in capsys.readouterr().out.splitlines() if line ]
        assert printed == [ "3", "7" ]

    def test_errors_do_not_end_the_session( self, capsys ):
        readline = Mock()
        script   = [ "1/0", "2^3", EOFError ]

        with patch.dict( sys.modules, { "readline": readline } ), \
             patch( "builtins.input", side_effect=scripted_input( script, [] ) ):
            assert cli.run_repl( None ) == 0

        printed = [ line for line in capsys.readouterr().out.splitlines() if line ]
        assert printed == [ "Division by zero", "8" ]

    def test_history_file_saved( self, tmp_path ):
        readline     = Mock()
        history_path = str( tmp_path / "history" / "history.txt" )

        with patch.dict( sys.modules, { "readline": readline } ), \
             patch( "builtins.input", side_effect=scripted_input( [ EOFError ], [] ) ):
            cli.run_repl( None, history_path=history_path )

        readline.read_history_file.assert_not_called()
        readline.write_history_file.assert_called_once_with( history_path )
