"""
Exchange rate providers for currency conversion.

Modules:
    rate_provider.py     - RateProvider protocol, pivot cross rates, StaticRateProvider
    mnb_rate_provider.py - Hungarian National Bank SOAP service with a daily file cache
    xml_models.py        - pydantic models for the service's XML documents
"""
