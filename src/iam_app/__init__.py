"""
iam-app -- a walkthrough client for the TypeDB IAM sample database.

Connects to a TypeDB server, creates and seeds the ``sample_app_db``
database, and runs a handful of canned queries against it.
"""

__version__ = "0.1.0"
