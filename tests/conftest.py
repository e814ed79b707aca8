"""
Shared fixtures for the unitcalc test suite.
"""

import os

import pytest

from unitcalc.config.configuration_manager import ConfigurationManager

FIXTURES_DIR = os.path.join( os.path.dirname( __file__ ), "fixtures" )

RATES_XML = """<MNBCurrentExchangeRates>
  <Day date="{date}">
    <Rate unit="1" curr="EUR">387,35</Rate>
    <Rate unit="1" curr="USD">356,40</Rate>
    <Rate unit="100" curr="JPY">230,10</Rate>
  </Day>
</MNBCurrentExchangeRates>"""


@pytest.fixture
def soap_response_xml():
    with open( os.path.join( FIXTURES_DIR, "mnb_response.xml" ), "r", encoding="utf-8" ) as f:
        return f.read()


@pytest.fixture
def rates_xml():
    """Factory for a rates document dated as requested."""
    def make( date: str = "2024-05-17" ) -> str:
        return RATES_XML.format( date=date )
    return make


@pytest.fixture
def reset_config():
    ConfigurationManager.reset_for_testing()
    yield
    ConfigurationManager.reset_for_testing()


@pytest.fixture
def config_file( tmp_path ):
    """An INI file with a [default] block and a [test] block that overrides two keys."""
    path = tmp_path / "unitcalc.ini"
    path.write_text(
        "[default]\n"
        "app_debug = False\n"
        f"cache_dir = {tmp_path / 'cache'}\n"
        f"history_file = {tmp_path / 'history.txt'}\n"
        "currency_service_url = http://rates.example.test/arfolyamok.asmx\n"
        "currency_request_timeout_secs = 2.5\n"
        "currency_base = HUF\n"
        "currency_cache_file = rates.xml\n"
        "currency_timezone = Europe/Budapest\n"
        "\n"
        "[test]\n"
        "app_debug = yes\n"
        "currency_cache_file = test-rates.xml\n",
        encoding="utf-8"
    )
    return str( path )
