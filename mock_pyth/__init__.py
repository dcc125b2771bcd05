"""In-memory mock of a pull-based price oracle for integration testing."""
from .codec import create_price_feed_update_data, decode_price_feed, encode_price_feed
from .errors import (
    InsufficientFee,
    InvalidUpdateData,
    PriceFeedNotFound,
    PriceFeedNotFoundWithinRange,
    PythError,
    RequirePriceFeeds,
    SequenceNumberOverflow,
    StalePrice,
)
from .events import BatchPriceFeedUpdate, EventLog, PaymentForwarded, PriceFeedUpdate
from .models import Price, PriceFeed, to_price_id
from .oracle import MockPyth

__all__ = [
    "BatchPriceFeedUpdate",
    "EventLog",
    "InsufficientFee",
    "InvalidUpdateData",
    "MockPyth",
    "PaymentForwarded",
    "Price",
    "PriceFeed",
    "PriceFeedNotFound",
    "PriceFeedNotFoundWithinRange",
    "PriceFeedUpdate",
    "PythError",
    "RequirePriceFeeds",
    "SequenceNumberOverflow",
    "StalePrice",
    "create_price_feed_update_data",
    "decode_price_feed",
    "encode_price_feed",
    "to_price_id",
]
