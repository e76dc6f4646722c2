"""Copy AMIs and their encrypted snapshots across AWS accounts and regions."""

__version__ = "1.0.0"
