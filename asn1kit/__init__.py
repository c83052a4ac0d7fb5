"""Parsing of BER/DER encoded ASN.1 objects and DER encoding: OIDs, REALs, strings, sequences and sets."""

__version__ = "0.1.0"

__all__ = ["iterator", "objects", "oid", "real", "sequence", "set", "strings"]