#!/usr/bin/env python3
"""
XML models for the MNB exchange rate web service.

Two documents are involved:

    1. The SOAP envelope returned by GetCurrentExchangeRates. Its result
       element carries the rates document as escaped text.
    2. The rates document itself:

        <MNBCurrentExchangeRates>
            <Day date="2024-05-17">
                <Rate unit="1" curr="EUR">387,35</Rate>
                <Rate unit="100" curr="JPY">230,12</Rate>
            </Day>
        </MNBCurrentExchangeRates>

Rate values use a decimal comma and are parsed into exact Rationals.
"""

from typing import ClassVar, Dict, List

from pydantic import Field, field_validator

from unitcalc.calculator.rational import Rational
from unitcalc.utils.util_xml_pydantic import BaseXMLModel

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
MNB_SERVICE_NS   = "http://www.mnb.hu/webservices/"
XSI_NS           = "http://www.w3.org/2001/XMLSchema-instance"

# Collapse every namespace the service uses so keys come back unprefixed
SOAP_NAMESPACES = {
    SOAP_ENVELOPE_NS : None,
    MNB_SERVICE_NS   : None,
    XSI_NS           : None,
}


def parse_rate( text: str ) -> Rational:
    """
    Parse a decimal-comma rate string into an exact Rational.

    Requires:
        - text is digits, optionally signed, with at most one ',' separator

    Ensures:
        - "382,12"  -> 9553/25
        - "382,10"  -> 3821/10 (trailing fraction zeros dropped)
        - "400"     -> 400     (no comma, nothing dropped)

    Raises:
        - ValueError on anything else, including values out of 64-bit range
    """
    text = text.strip()

    if "," in text:
        whole, fraction = text.split( ",", 1 )
        fraction = fraction.rstrip( "0" )
    else:
        whole, fraction = text, ""

    digits = whole + fraction
    if not digits.lstrip( "+-" ).isdigit():
        raise ValueError( f"Not a decimal-comma number: [{text}]" )

    try:
        return Rational( int( digits ), 10 ** len( fraction ) )
    except OverflowError as e:
        raise ValueError( f"Rate out of range: [{text}]" ) from e


class ExchangeRate( BaseXMLModel ):
    """
    One <Rate> element: the HUF price of `unit` units of `currency`.
    """

    currency : str      = Field( ..., alias="@curr" )
    unit     : int      = Field( default=1, alias="@unit" )
    value    : Rational = Field( ..., alias="#text" )

    @field_validator( "currency", mode="before" )
    @classmethod
    def _upper_case_code( cls, v ):
        return v.strip().upper() if isinstance( v, str ) else v

    @field_validator( "value", mode="before" )
    @classmethod
    def _parse_decimal_comma( cls, v ):
        if isinstance( v, str ):
            return parse_rate( v )
        return v

    @field_validator( "unit" )
    @classmethod
    def _positive_unit( cls, v ):
        if v <= 0:
            raise ValueError( f"Rate unit must be positive, got [{v}]" )
        return v

    def per_unit( self ) -> Rational:
        """Price of a single unit of the currency."""
        if self.unit == 1:
            return self.value
        return self.value / Rational( self.unit )


class RatesDay( BaseXMLModel ):
    """One <Day> element with its rates."""

    date  : str                = Field( ..., alias="@date" )
    rates : List[ExchangeRate] = Field( default_factory=list, alias="Rate" )


class CurrentExchangeRates( BaseXMLModel ):
    """
    Root of the rates document.

    Use from_rates_xml() rather than from_xml() so that a day with a single
    <Rate> still parses into a list.
    """

    ROOT_TAG   : ClassVar[str]       = "MNBCurrentExchangeRates"
    FORCE_LIST : ClassVar[List[str]] = [ "Rate" ]

    day : RatesDay = Field( ..., alias="Day" )

    @classmethod
    def from_rates_xml( cls, xml_string: str ) -> "CurrentExchangeRates":
        return cls.from_xml( xml_string, root_tag=cls.ROOT_TAG, force_list=cls.FORCE_LIST )

    @property
    def date( self ) -> str:
        return self.day.date

    def rate_table( self ) -> Dict[str, Rational]:
        """
        Map currency code to the base-currency price of one unit.

        Ensures:
            - Unit divisors are applied (100 JPY quoted -> price of 1 JPY)
            - Later duplicates of a code replace earlier ones
        """
        return { rate.currency: rate.per_unit() for rate in self.day.rates }


class GetCurrentExchangeRatesResponse( BaseXMLModel ):
    result : str = Field( ..., alias="GetCurrentExchangeRatesResult" )


class SoapBody( BaseXMLModel ):
    response : GetCurrentExchangeRatesResponse = Field( ..., alias="GetCurrentExchangeRatesResponse" )


class SoapEnvelope( BaseXMLModel ):
    """
    SOAP response to GetCurrentExchangeRates.

    Parsed with namespace processing, so the element prefixes the server
    chooses do not matter.
    """

    body : SoapBody = Field( ..., alias="Body" )

    @classmethod
    def from_soap_xml( cls, xml_string: str ) -> "SoapEnvelope":
        return cls.from_xml( xml_string, root_tag="Envelope", namespaces=SOAP_NAMESPACES )

    @property
    def rates_xml( self ) -> str:
        return self.body.response.result


def quick_smoke_test():
    """Quick smoke test for the rates document models."""
    print( "Testing MNB XML models..." )

    xml = """<MNBCurrentExchangeRates>
               <Day date="2024-05-17">
                 <Rate unit="1" curr="EUR">387,35</Rate>
                 <Rate unit="100" curr="JPY">230,10</Rate>
               </Day>
             </MNBCurrentExchangeRates>"""

    document = CurrentExchangeRates.from_rates_xml( xml )
    table    = document.rate_table()

    print( f"  date: {document.date}" )
    for code, rate in table.items():
        print( f"  {code}: {rate} ({float( rate )})" )

    assert table[ "EUR" ] == Rational( 38735, 100 )
    assert table[ "JPY" ] == Rational( 2301, 1000 )

    print( "✓ MNB XML models smoke test passed" )


if __name__ == "__main__":
    quick_smoke_test()
