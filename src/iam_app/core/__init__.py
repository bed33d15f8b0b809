"""iam-app core -- settings, errors, logging and the driver boundary.

Architecture::

    errors.py          Structured error hierarchy (IamAppError, DriverError)
    logging.py         structlog configuration + LogContext
    settings.py        IamAppSettings (pydantic-settings) + get_settings()
    protocols.py       GraphDriver / GraphSession / GraphTransaction
    typedb_driver.py   TypeDB adapter implementing the protocols
    typeql.py          Query templates, literal quoting, .tql file loading
"""
