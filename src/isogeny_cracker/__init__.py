"""Key recovery against SIDH-style isogeny key exchange."""

__version__ = "0.1.0"
