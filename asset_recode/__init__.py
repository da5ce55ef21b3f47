"""asset-recode — re-encode media assets in place, safely."""

__version__ = "0.1.0"
