#!/usr/bin/env python3
"""
Unit tests for MnbRateProvider.

The SOAP call and the clock are mocked; the cache lives in tmp_path.

Run with: pytest -v tests/test_mnb_rate_provider.py
"""

import os
from unittest.mock import Mock, patch

import pytest
import requests

import unitcalc.utils.util as du
from unitcalc.calculator.calc_exceptions import ConversionError
from unitcalc.calculator.rational import Rational
from unitcalc.currency.mnb_rate_provider import SOAP_HEADERS, MnbRateProvider
from unitcalc.currency.rate_provider import RateProvider
from unitcalc.utils.util_xml_pydantic import XMLParsingError

TODAY     = "2024-05-17"
YESTERDAY = "2024-05-16"

POST_TARGET = "unitcalc.currency.mnb_rate_provider.requests.post"


def fake_date( tz_name="Europe/Budapest", offset=0 ):
    return { 0: TODAY, -1: YESTERDAY }[ offset ]


@pytest.fixture( autouse=True )
def fixed_clock():
    with patch.object( du, "get_current_date", side_effect=fake_date ) as mock_date:
        yield mock_date


@pytest.fixture
def provider( tmp_path ):
    return MnbRateProvider( str( tmp_path / "cache" ), service_url="http://rates.example.test/arfolyamok.asmx", timeout_secs=3 )


def ok_response( text ):
    response = Mock()
    response.text = text
    response.raise_for_status.return_value = None
    return response


class TestFetch:
    """Tests for fetching from the service."""

    def test_fetches_and_caches( self, provider, soap_response_xml ):
        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ) as mock_post:
            assert provider.convert( "EUR", "HUF" ) == Rational( 38735, 100 )

        mock_post.assert_called_once()
        assert os.path.isfile( provider.cache_path )
        assert du.get_file_as_string( provider.cache_path ).startswith( "<MNBCurrentExchangeRates>" )

    def test_request_shape( self, provider, soap_response_xml ):
        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ) as mock_post:
            provider.get_rates()

        args, kwargs = mock_post.call_args
        assert args[ 0 ] == "http://rates.example.test/arfolyamok.asmx"
        assert kwargs[ "timeout" ] == 3
        assert kwargs[ "headers" ] == SOAP_HEADERS
        assert b"GetCurrentExchangeRates" in kwargs[ "data" ]

    def test_rates_are_loaded_once( self, provider, soap_response_xml ):
        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ) as mock_post:
            provider.convert( "EUR", "HUF" )
            provider.convert( "USD", "HUF" )

        assert mock_post.call_count == 1

    def test_cross_rate_and_unit_divisor( self, provider, soap_response_xml ):
        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ):
            assert provider.convert( "JPY", "HUF" ) == Rational( 2301, 1000 )
            assert provider.convert( "EUR", "USD" ) == Rational( 38735, 100 ) / Rational( 3564, 10 )
            assert provider.convert( "HUF", "EUR" ) == Rational( 100, 38735 )

    def test_unknown_code( self, provider, soap_response_xml ):
        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ):
            with pytest.raises( ConversionError, match="GBP" ):
                provider.convert( "GBP", "HUF" )

    def test_satisfies_protocol( self, provider ):
        assert isinstance( provider, RateProvider )


class TestCache:
    """Tests for the daily file cache."""

    @pytest.mark.parametrize( "date", [ TODAY, YESTERDAY ] )
    def test_fresh_cache_skips_fetch( self, provider, rates_xml, date ):
        du.write_string_to_file( provider.cache_path, rates_xml( date ) )

        with patch( POST_TARGET ) as mock_post:
            assert provider.convert( "EUR", "HUF" ) == Rational( 38735, 100 )

        mock_post.assert_not_called()

    def test_stale_cache_refetches( self, provider, rates_xml, soap_response_xml ):
        du.write_string_to_file( provider.cache_path, rates_xml( "2024-05-01" ) )

        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ) as mock_post:
            provider.get_rates()

        mock_post.assert_called_once()

    def test_corrupt_cache_refetches( self, provider, soap_response_xml ):
        du.write_string_to_file( provider.cache_path, "<MNBCurrentExchangeRates><Day" )

        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ) as mock_post:
            assert provider.convert( "EUR", "HUF" ) == Rational( 38735, 100 )

        mock_post.assert_called_once()

    def test_unwritable_cache_is_not_fatal( self, provider, soap_response_xml ):
        with patch( POST_TARGET, return_value=ok_response( soap_response_xml ) ), \
             patch.object( du, "write_string_to_file", side_effect=OSError( "read-only" ) ):
            assert provider.convert( "EUR", "HUF" ) == Rational( 38735, 100 )


class TestFailures:
    """Tests for service failures."""

    def test_connection_error( self, provider ):
        with patch( POST_TARGET, side_effect=requests.ConnectionError( "no route" ) ) as mock_post:
            with pytest.raises( ConversionError ) as exc_info:
                provider.convert( "EUR", "HUF" )

            assert isinstance( exc_info.value.__cause__, requests.ConnectionError )
            assert exc_info.value.cause is exc_info.value.__cause__

            # the failure is remembered; no second request
            with pytest.raises( ConversionError ):
                provider.convert( "USD", "HUF" )

        assert mock_post.call_count == 1

    def test_http_error_status( self, provider ):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError( "500 Server Error" )

        with patch( POST_TARGET, return_value=response ):
            with pytest.raises( ConversionError ) as exc_info:
                provider.convert( "EUR", "HUF" )

        assert isinstance( exc_info.value.__cause__, requests.HTTPError )

    def test_unexpected_envelope( self, provider ):
        with patch( POST_TARGET, return_value=ok_response( "<html>oops</html>" ) ):
            with pytest.raises( ConversionError ) as exc_info:
                provider.convert( "EUR", "HUF" )

        assert isinstance( exc_info.value.__cause__, XMLParsingError )
        assert not os.path.exists( provider.cache_path )


class TestFromConfig:
    """Tests for building the provider from configuration."""

    def test_reads_currency_keys( self ):
        values = {
            "cache_dir"                     : "/tmp/unitcalc-cache",
            "currency_service_url"          : "http://rates.example.test/",
            "currency_request_timeout_secs" : 4.5,
            "currency_base"                 : "huf",
            "currency_cache_file"           : "today.xml",
            "currency_timezone"             : "UTC",
        }
        config_mgr = Mock()
        config_mgr.get.side_effect = lambda key, default=None, return_type="string": values[ key ]

        provider = MnbRateProvider.from_config( config_mgr )

        assert provider.cache_path    == os.path.join( "/tmp/unitcalc-cache", "today.xml" )
        assert provider.service_url   == "http://rates.example.test/"
        assert provider.timeout_secs  == 4.5
        assert provider.base_currency == "HUF"
        assert provider.tz_name       == "UTC"
