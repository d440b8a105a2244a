"""Media Vault: uploaded media assets split across a blob store and a metadata store."""

__version__ = "0.1.0"
