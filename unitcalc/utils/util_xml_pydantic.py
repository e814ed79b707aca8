#!/usr/bin/env python3
"""
Pydantic XML Utilities

Base class for parsing XML documents into validated Python objects using
Pydantic models with xmltodict integration.

This module provides:
- BaseXMLModel: Base class for XML-backed Pydantic models
- XMLParsingError: single error type for every XML or validation failure

xmltodict conventions apply: attributes arrive as "@name" keys and element
text next to attributes arrives as "#text"; models map them with aliases.
"""

from typing import Any, Dict, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

import xmltodict

# Type variable for BaseXMLModel subclasses
T = TypeVar( 'T', bound='BaseXMLModel' )


class XMLParsingError( Exception ):
    """
    Custom exception for XML parsing errors.

    Raised when XML cannot be parsed or converted to Pydantic models.
    Provides more context than generic parsing errors.
    """

    def __init__( self, message: str, xml_content: Optional[str] = None, original_error: Optional[Exception] = None ):
        """
        Initialize XML parsing error.

        Args:
            message: Human-readable error description
            xml_content: The XML content that failed to parse (truncated if long)
            original_error: The underlying exception that caused this error
        """
        self.xml_content = xml_content[:200] + "..." if xml_content and len( xml_content ) > 200 else xml_content
        self.original_error = original_error

        full_message = message
        if self.xml_content:
            full_message += f" | XML: {self.xml_content}"
        if self.original_error:
            full_message += f" | Cause: {self.original_error}"

        super().__init__( full_message )


def parse_xml( xml_string: str, force_list: Optional[Iterable[str]] = None, namespaces: Optional[Dict[str, Any]] = None ) -> Dict[str, Any]:
    """
    Parse an XML string into a dictionary.

    Requires:
        - xml_string is non-empty

    Ensures:
        - Elements named in force_list always come back as lists
        - When namespaces is given, namespace URIs are collapsed per xmltodict's rules

    Raises:
        - XMLParsingError if the string is empty or not well formed
    """
    if not xml_string or not xml_string.strip():
        raise XMLParsingError( "XML string is empty or whitespace" )

    kwargs = { }
    if force_list:
        kwargs[ "force_list" ] = tuple( force_list )
    if namespaces is not None:
        kwargs[ "process_namespaces" ] = True
        kwargs[ "namespaces" ]         = namespaces

    try:
        return xmltodict.parse( xml_string.strip(), **kwargs )
    except xmltodict.expat.ExpatError as e:
        raise XMLParsingError( f"Invalid XML format: {str(e)}", xml_content=xml_string, original_error=e )


class BaseXMLModel( BaseModel ):
    """
    Base class for all XML-backed Pydantic models.

    Usage:
        class Rate( BaseXMLModel ):
            curr: str = Field( alias="@curr" )

        obj = Rate.from_xml( '<Rate curr="EUR">1</Rate>' )
    """

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Allow arbitrary user types (Rational values)
        arbitrary_types_allowed=True,
        # Namespace declarations and unused attributes are tolerated
        extra="allow"
    )

    @classmethod
    def from_xml( cls: Type[T], xml_string: str, root_tag: Optional[str] = None,
                  force_list: Optional[Iterable[str]] = None, namespaces: Optional[Dict[str, Any]] = None ) -> T:
        """
        Parse XML string into a model instance.

        Requires:
            - xml_string is well formed XML

        Ensures:
            - The element named root_tag (or the single root element) feeds the model
            - Empty root elements validate as an empty mapping

        Raises:
            - XMLParsingError if XML parsing or validation fails
        """
        xml_dict = parse_xml( xml_string, force_list=force_list, namespaces=namespaces )

        if root_tag is not None and root_tag in xml_dict:
            model_data = xml_dict[ root_tag ]
        elif len( xml_dict ) == 1:
            # Single root element - use it regardless of name
            model_data = list( xml_dict.values() )[ 0 ]
        else:
            model_data = xml_dict

        if model_data is None:
            model_data = {}

        return cls.from_dict( model_data, xml_string )

    @classmethod
    def from_dict( cls: Type[T], model_data: Any, xml_string: Optional[str] = None ) -> T:
        try:
            return cls.model_validate( model_data )
        except ValidationError as e:
            raise XMLParsingError(
                f"Data validation failed: {str(e)}",
                xml_content=xml_string,
                original_error=e
            )
