#!/usr/bin/env python3
"""
Exchange rates from the Hungarian National Bank (MNB) SOAP web service.

Rates are quoted in HUF, so HUF is the pivot for every cross rate. The
service publishes once per banking day; the last response is cached on disk
and reused while its date is today or yesterday, Budapest time.

Rates are loaded lazily on the first conversion and kept for the provider's
lifetime. A load failure is kept as well and re-raised without refetching.
"""

import logging
import os
from typing import Dict, Optional

import requests

import unitcalc.utils.util as du
from unitcalc.calculator.calc_exceptions import ConversionError
from unitcalc.calculator.rational import Rational
from unitcalc.currency.rate_provider import pivot_convert
from unitcalc.currency.xml_models import CurrentExchangeRates, SoapEnvelope
from unitcalc.utils.util_xml_pydantic import XMLParsingError

logger = logging.getLogger( __name__ )

DEFAULT_SERVICE_URL   = "http://www.mnb.hu/arfolyamok.asmx"
DEFAULT_TIMEOUT_SECS  = 10
DEFAULT_CACHE_FILE    = "rates.xml"
DEFAULT_TIMEZONE      = "Europe/Budapest"
DEFAULT_BASE_CURRENCY = "HUF"

SOAP_REQUEST_BODY = (
    '<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/" '
    'xmlns:web="http://www.mnb.hu/webservices/">'
    '<soapenv:Header/>'
    '<soapenv:Body><web:GetCurrentExchangeRates/></soapenv:Body>'
    '</soapenv:Envelope>'
)
SOAP_HEADERS = {
    "Content-Type" : "text/xml;charset=UTF-8",
    "SOAPAction"   : '"http://www.mnb.hu/webservices/MNBArfolyamServiceSoap/GetCurrentExchangeRates"',
}


class MnbRateProvider:
    """
    RateProvider backed by the MNB service with a daily file cache.

    Requires:
        - cache_dir is a writable directory path (created on first save)
        - tz_name is a pytz timezone name

    Ensures:
        - convert() follows the pivot rules of rate_provider.pivot_convert
        - At most one network fetch per provider instance

    Raises:
        - ConversionError from convert() when rates cannot be loaded or a
          code has no rate; the underlying exception is chained
    """

    def __init__( self, cache_dir: str, service_url: str = DEFAULT_SERVICE_URL, timeout_secs: float = DEFAULT_TIMEOUT_SECS,
                  base_currency: str = DEFAULT_BASE_CURRENCY, cache_file_name: str = DEFAULT_CACHE_FILE,
                  tz_name: str = DEFAULT_TIMEZONE, debug: bool = False ):

        self.cache_dir       = cache_dir
        self.service_url     = service_url
        self.timeout_secs    = timeout_secs
        self.base_currency   = base_currency.upper()
        self.cache_file_name = cache_file_name
        self.tz_name         = tz_name
        self.debug           = debug

        self._rates          : Optional[Dict[str, Rational]] = None
        self._load_error     : Optional[Exception]           = None

    @classmethod
    def from_config( cls, config_mgr, debug: bool = False ) -> "MnbRateProvider":
        """
        Build a provider from the currency_* and cache_dir configuration keys.
        """
        return cls(
            cache_dir       = du.expand_path( config_mgr.get( "cache_dir" ) ),
            service_url     = config_mgr.get( "currency_service_url", default=DEFAULT_SERVICE_URL ),
            timeout_secs    = config_mgr.get( "currency_request_timeout_secs", default=DEFAULT_TIMEOUT_SECS, return_type="float" ),
            base_currency   = config_mgr.get( "currency_base", default=DEFAULT_BASE_CURRENCY ),
            cache_file_name = config_mgr.get( "currency_cache_file", default=DEFAULT_CACHE_FILE ),
            tz_name         = config_mgr.get( "currency_timezone", default=DEFAULT_TIMEZONE ),
            debug           = debug
        )

    @property
    def cache_path( self ) -> str:
        return os.path.join( self.cache_dir, self.cache_file_name )

    def convert( self, from_code: str, to_code: str ) -> Rational:
        """
        How many to_code one from_code is worth.

        Raises:
            - ConversionError when rates are unavailable or a code is unknown
        """
        return pivot_convert( self.get_rates(), from_code, to_code, self.base_currency )

    def get_rates( self ) -> Dict[str, Rational]:
        """
        Load rates on first use and return the code -> HUF price table.

        Raises:
            - ConversionError if neither the cache nor the service delivers
        """
        if self._rates is not None:
            return self._rates

        if self._load_error is not None:
            raise ConversionError( "Conversion error: exchange rates unavailable", cause=self._load_error ) from self._load_error

        try:
            self._rates = self._load_rates()
        except ( requests.RequestException, XMLParsingError ) as e:
            logger.error( f"Failed to load exchange rates from {self.service_url}: {e}" )
            self._load_error = e
            raise ConversionError( "Conversion error: exchange rates unavailable", cause=e ) from e

        return self._rates

    def _load_rates( self ) -> Dict[str, Rational]:
        document = self._load_cached_document()

        if document is None:
            rates_xml = self._fetch_rates_xml()
            document  = CurrentExchangeRates.from_rates_xml( rates_xml )
            self._save_cache( rates_xml )

        rates = document.rate_table()
        logger.info( f"Loaded {len( rates )} exchange rates for {document.date}" )

        return rates

    def _is_fresh( self, date: str ) -> bool:
        today     = du.get_current_date( tz_name=self.tz_name )
        yesterday = du.get_current_date( tz_name=self.tz_name, offset=-1 )
        return date in ( today, yesterday )

    def _load_cached_document( self ) -> Optional[CurrentExchangeRates]:
        """
        Read the cached rates document if it exists, parses, and is fresh.

        Ensures:
            - Returns None (never raises) when the cache cannot be used
        """
        path = self.cache_path
        if not os.path.exists( path ):
            logger.debug( f"Rate cache miss: {path} does not exist" )
            return None

        try:
            document = CurrentExchangeRates.from_rates_xml( du.get_file_as_string( path ) )
        except ( OSError, XMLParsingError ) as e:
            logger.warning( f"Ignoring unreadable rate cache {path}: {e}" )
            return None

        if not self._is_fresh( document.date ):
            logger.info( f"Rate cache is stale ({document.date}), refetching" )
            return None

        logger.debug( f"Rate cache hit: {path} ({document.date})" )
        return document

    def _fetch_rates_xml( self ) -> str:
        """
        POST GetCurrentExchangeRates and return the embedded rates document.

        Raises:
            - requests.RequestException on transport errors or HTTP error status
            - XMLParsingError if the envelope is not the expected shape
        """
        if self.debug: print( f"Fetching exchange rates from {self.service_url}..." )
        logger.info( f"Fetching exchange rates from {self.service_url}" )

        response = requests.post(
            self.service_url,
            data=SOAP_REQUEST_BODY.encode( "utf-8" ),
            headers=SOAP_HEADERS,
            timeout=self.timeout_secs
        )
        response.raise_for_status()

        return SoapEnvelope.from_soap_xml( response.text ).rates_xml

    def _save_cache( self, rates_xml: str ) -> None:
        try:
            du.write_string_to_file( self.cache_path, rates_xml )
            logger.debug( f"Saved exchange rates to {self.cache_path}" )
        except OSError as e:
            logger.warning( f"Could not save rate cache {self.cache_path}: {e}" )


def quick_smoke_test():
    """Quick smoke test: live fetch, needs network access."""
    import tempfile

    du.print_banner( "Testing MnbRateProvider (live)", prepend_nl=True )

    with tempfile.TemporaryDirectory() as cache_dir:
        provider = MnbRateProvider( cache_dir, debug=True )
        try:
            for code in [ "EUR", "USD", "JPY" ]:
                rate = provider.convert( code, "HUF" )
                print( f"  1 {code} = {float( rate ):.4f} HUF" )
            print( "✓ MnbRateProvider smoke test passed" )
        except ConversionError as e:
            print( f"✗ {e} (cause: {e.cause})" )


if __name__ == "__main__":
    quick_smoke_test()
