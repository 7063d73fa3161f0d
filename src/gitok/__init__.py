"""gitok — passphrase-encrypted git access tokens with credential-cache handoff."""

__version__ = "0.3.0"
