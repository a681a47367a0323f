"""Deal loader library public API.

Provides JSON and CSV deal file parsing for command-line bulk import.
"""

from fx_deals.lib.deal_loader.loader import load_deals, load_deals_csv, load_deals_json

__all__ = [
    "load_deals",
    "load_deals_csv",
    "load_deals_json",
]
