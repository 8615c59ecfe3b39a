"""Input parsing for batches of incoming content items."""

from .json_parser import item_to_dict, parse_items_json

__all__ = ["parse_items_json", "item_to_dict"]
