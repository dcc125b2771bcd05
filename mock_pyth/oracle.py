"""Mock oracle — batch updates, queries and on-demand request simulation."""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence

from .clock import wall_clock
from .codec import create_price_feed_update_data, decode_price_feed
from .config import OracleConfig
from .correlator import RequestCorrelator, check_price_ids
from .errors import (
    InsufficientFee,
    PriceFeedNotFoundWithinRange,
    SequenceNumberOverflow,
    StalePrice,
)
from .events import BatchPriceFeedUpdate, OracleEvent, PaymentForwarded, PriceFeedUpdate
from .fees import FeeCalculator
from .interfaces.event_sink import EventSink
from .interfaces.payment_gateway import PaymentGateway
from .models import Price, PriceFeed, format_price_id
from .payments import InMemoryLedger, TransferResult, forward_payment
from .store import PriceStore

logger = logging.getLogger(__name__)

# Every batch is attributed to one simulated source chain.
SOURCE_CHAIN_ID = 2

MAX_SEQUENCE_NUMBER = (1 << 64) - 1


class MockPyth:
    """In-memory stand-in for a pull-based price oracle.

    Each public operation runs under one lock and either completes or raises
    with no state change. The only side effect that may fail without aborting
    is forwarding a resolve payment, which is reported as a
    ``PaymentForwarded`` event.
    """

    def __init__(
        self,
        config: OracleConfig,
        *,
        store: PriceStore | None = None,
        correlator: RequestCorrelator | None = None,
        payments: PaymentGateway | None = None,
        sinks: Sequence[EventSink] = (),
        clock: Callable[[], int] = wall_clock,
    ) -> None:
        self._config = config
        self._fees = FeeCalculator(config.single_update_fee_in_wei)
        self._store = store if store is not None else PriceStore()
        self._correlator = correlator if correlator is not None else RequestCorrelator()
        self._payments: PaymentGateway = (
            payments if payments is not None else InMemoryLedger()
        )
        self._sinks: list[EventSink] = list(sinks)
        self._clock = clock
        self._lock = threading.RLock()
        self._sequence_number = 0
        self._collected_fees = 0

    # ------------------------------------------------------------------
    # State inspection
    # ------------------------------------------------------------------

    @property
    def store(self) -> PriceStore:
        return self._store

    @property
    def correlator(self) -> RequestCorrelator:
        return self._correlator

    @property
    def sequence_number(self) -> int:
        return self._sequence_number

    @property
    def collected_fees(self) -> int:
        return self._collected_fees

    def add_sink(self, sink: EventSink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def _emit(self, event: OracleEvent) -> None:
        for sink in self._sinks:
            try:
                sink.emit(event)
            except Exception as e:
                logger.error(
                    "Event sink %r failed on %s: %s", sink, type(event).__name__, e
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_valid_time_period(self) -> int:
        return self._config.valid_time_period

    def get_update_fee(self, update_data: Sequence[bytes]) -> int:
        return self._fees.compute_fee(len(update_data))

    def price_feed_exists(self, price_id: bytes) -> bool:
        with self._lock:
            return self._store.exists(price_id)

    def query_price_feed(self, price_id: bytes) -> PriceFeed:
        with self._lock:
            return self._store.query(price_id)

    get_price_feed = query_price_feed

    def get_price_unsafe(self, price_id: bytes) -> Price:
        return self.query_price_feed(price_id).price

    def get_ema_price_unsafe(self, price_id: bytes) -> Price:
        return self.query_price_feed(price_id).ema_price

    def _check_age(self, price_id: bytes, price: Price, age: int) -> Price:
        now = self._clock()
        if abs(now - price.publish_time) > age:
            raise StalePrice(price_id, price.publish_time, now, age)
        return price

    def get_price_no_older_than(self, price_id: bytes, age: int) -> Price:
        return self._check_age(price_id, self.get_price_unsafe(price_id), age)

    def get_ema_price_no_older_than(self, price_id: bytes, age: int) -> Price:
        return self._check_age(price_id, self.get_ema_price_unsafe(price_id), age)

    def get_price(self, price_id: bytes) -> Price:
        return self.get_price_no_older_than(price_id, self._config.valid_time_period)

    def get_ema_price(self, price_id: bytes) -> Price:
        return self.get_ema_price_no_older_than(
            price_id, self._config.valid_time_period
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def _require_fee(self, update_data: Sequence[bytes], payment: int) -> None:
        required = self.get_update_fee(update_data)
        if payment < required:
            raise InsufficientFee(required, payment)

    def _update(self, update_data: Sequence[bytes], payment: int) -> None:
        """Apply one batch; caller holds the lock."""
        self._require_fee(update_data, payment)
        if self._sequence_number >= MAX_SEQUENCE_NUMBER:
            raise SequenceNumberOverflow(
                f"Sequence number {self._sequence_number} cannot advance"
            )

        # Whole batch decodes before the store is touched.
        feeds = [decode_price_feed(item) for item in update_data]

        events: list[OracleEvent] = []
        for feed in feeds:
            ok, last_publish_time = self._store.apply(feed)
            if ok:
                events.append(
                    PriceFeedUpdate(
                        id=feed.id,
                        last_publish_time=last_publish_time,
                        price=feed.price.price,
                        conf=feed.price.conf,
                    )
                )
        events.append(BatchPriceFeedUpdate(SOURCE_CHAIN_ID, self._sequence_number))

        logger.info(
            "Batch %d processed: %d/%d feeds accepted",
            self._sequence_number,
            len(events) - 1,
            len(feeds),
        )
        self._sequence_number += 1
        self._collected_fees += payment

        for event in events:
            self._emit(event)

    def update_price_feeds(self, update_data: Sequence[bytes], payment: int = 0) -> None:
        """Apply a batch of encoded updates; raises ``InsufficientFee`` on underpayment."""
        with self._lock:
            self._update(update_data, payment)

    def parse_price_feed_updates(
        self,
        update_data: Sequence[bytes],
        price_ids: Sequence[bytes],
        min_publish_time: int,
        max_publish_time: int,
        payment: int = 0,
    ) -> list[PriceFeed]:
        """Return, per requested id, a feed from ``update_data`` inside the window.

        The store and the sequence number are left untouched.
        """
        with self._lock:
            return self._parse(
                update_data, price_ids, min_publish_time, max_publish_time,
                payment, unique=False,
            )

    def parse_price_feed_updates_unique(
        self,
        update_data: Sequence[bytes],
        price_ids: Sequence[bytes],
        min_publish_time: int,
        max_publish_time: int,
        payment: int = 0,
    ) -> list[PriceFeed]:
        """Like ``parse_price_feed_updates`` but only the first update in the window.

        A candidate qualifies only if the stored publish time for its id (0 when
        absent) is earlier than ``min_publish_time``.
        """
        with self._lock:
            return self._parse(
                update_data, price_ids, min_publish_time, max_publish_time,
                payment, unique=True,
            )

    def _parse(
        self,
        update_data: Sequence[bytes],
        price_ids: Sequence[bytes],
        min_publish_time: int,
        max_publish_time: int,
        payment: int,
        unique: bool,
    ) -> list[PriceFeed]:
        self._require_fee(update_data, payment)
        candidates = [decode_price_feed(item) for item in update_data]

        feeds: list[PriceFeed] = []
        for price_id in price_ids:
            if unique and self._store.last_publish_time(price_id) >= min_publish_time:
                raise PriceFeedNotFoundWithinRange(
                    price_id, min_publish_time, max_publish_time
                )
            feeds.append(
                self._store.query_in_window(
                    price_id, candidates, min_publish_time, max_publish_time
                )
            )
        return feeds

    # ------------------------------------------------------------------
    # On-demand request simulation
    # ------------------------------------------------------------------

    def update_price_feeds_on_behalf_of(
        self,
        requester: str,
        price_ids: Sequence[bytes],
        update_data: Sequence[bytes],
        payment: int,
        payer: str,
    ) -> bytes:
        """Apply ``update_data`` and register ``payer`` for a later resolve.

        The batch is not checked to contain ``price_ids``.
        """
        check_price_ids(price_ids)
        with self._lock:
            self._update(update_data, payment)
            key = self._correlator.register(requester, price_ids, payer)
            logger.info(
                "Registered request 0x%s for %s (payer %s)", key.hex(), requester, payer
            )
            return key

    def require_price_feeds(
        self, caller: str, price_ids: Sequence[bytes], payment: int = 0
    ) -> bytes:
        """Resolve the caller's pending request and forward ``payment`` to its payer.

        Raises ``RequirePriceFeeds`` when nothing is pending for this caller and
        id set.
        """
        check_price_ids(price_ids)
        with self._lock:
            key, payer = self._correlator.resolve(caller, price_ids)
            result: TransferResult = forward_payment(self._payments, payer, payment)
            self._emit(
                PaymentForwarded(
                    correlation_id=key,
                    recipient=payer,
                    amount=payment,
                    succeeded=result.succeeded,
                    error=result.error,
                )
            )
            logger.info(
                "Resolved request 0x%s for %s (%s)",
                key.hex(),
                caller,
                ", ".join(format_price_id(pid) for pid in price_ids),
            )
            return key

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def create_price_feed_update_data(
        price_id: bytes | str | int,
        price: int,
        conf: int,
        expo: int,
        ema_price: int,
        ema_conf: int,
        publish_time: int,
    ) -> bytes:
        return create_price_feed_update_data(
            price_id, price, conf, expo, ema_price, ema_conf, publish_time
        )
