#!/usr/bin/env python3
"""Swap event decoding for the Vanilla swap log viewer.

This module turns raw Swap event logs into SwapRecord rows. The event data
holds four unsigned 256-bit words (amount0In, amount1In, amount0Out,
amount1Out); amounts are 18-decimal fixed point.
"""

import logging
import math
from collections.abc import Iterable
from decimal import Decimal, localcontext
from typing import Any

from .models import SwapRecord
from .utils.hex_utility import parse_hex_word, parse_quantity, to_hex_string

# Get logger for this module
logger = logging.getLogger(__name__)

TOKEN_DECIMALS = 18
WEI_PER_TOKEN = Decimal(10) ** TOKEN_DECIMALS

# 256-bit operands need ~78 significant digits, the default context keeps 28
DECIMAL_PRECISION = 999

UNKNOWN_TX_ID = "Unknown"


def to_token_units(amount: int) -> Decimal:
    """Rescale an 18-decimal fixed-point integer to whole tokens, exactly."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(amount) / WEI_PER_TOKEN


def abs_ratio(numerator: float, denominator: float) -> float:
    """Return |numerator / denominator| with IEEE semantics for a zero denominator.

    x/0 is inf for non-zero x and 0/0 is nan, as float division would give
    in languages that do not raise on it.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.inf
    return abs(numerator / denominator)


def decode_net_amounts(data: str) -> tuple[Decimal, Decimal]:
    """Decode the net token amounts of a Swap event's data field.

    Args:
        data: "0x" prefixed hex string of four 32-byte words

    Returns:
        Tuple of (amount0In - amount0Out, amount1In - amount1Out) in whole
        tokens

    Raises:
        ValueError: If a word is missing or not valid hex
    """
    amount0_in = parse_hex_word(data, 0)
    amount1_in = parse_hex_word(data, 1)
    amount0_out = parse_hex_word(data, 2)
    amount1_out = parse_hex_word(data, 3)

    return (
        to_token_units(amount0_in - amount0_out),
        to_token_units(amount1_in - amount1_out)
    )


def _get_field(log: Any, name: str) -> Any:
    """Read a field from a dict-like log or a log object."""
    if hasattr(log, 'get'):
        return log.get(name)
    return getattr(log, name, None)


def normalize_tx_id(tx_hash: Any) -> str:
    """Return the transaction hash as a hex string, or "Unknown"."""
    if isinstance(tx_hash, str):
        return tx_hash
    if isinstance(tx_hash, (bytes, bytearray)):
        return to_hex_string(tx_hash).lower()
    return UNKNOWN_TX_ID


class SwapDecoder:
    """Decodes raw Swap event logs into SwapRecord objects.

    This class is responsible for:
    - Skipping log entries that carry no hex payload
    - Decoding the four amount words into net token amounts
    - Computing the display ratios
    - Keeping counts of decoded and skipped entries
    """

    def __init__(self) -> None:
        """Initialize the SwapDecoder."""
        self.logs_decoded = 0
        self.logs_skipped = 0

    def decode_logs(self, logs: Iterable[Any]) -> list[SwapRecord]:
        """Decode logs in the order given, skipping malformed entries.

        Args:
            logs: Raw logs as returned by eth_getLogs

        Returns:
            List of decoded records

        Raises:
            ValueError: If a log's data is a string but not valid hex words
        """
        records: list[SwapRecord] = []
        for log in logs:
            record = self.decode_log(log)
            if record is not None:
                records.append(record)
        return records

    def decode_log(self, log: Any) -> SwapRecord | None:
        """Decode a single log.

        Args:
            log: Raw log (dict-like or object with attributes)

        Returns:
            SwapRecord, or None if the log has no usable data field
        """
        if isinstance(log, str):
            # eth_getLogs can return bare hashes for some filter kinds
            self.logs_skipped += 1
            logger.debug(f"Skipping non-object log entry: {log}")
            return None

        data = to_hex_string(_get_field(log, 'data'))
        if not data:
            self.logs_skipped += 1
            logger.debug(f"Skipping log without data: {log}")
            return None

        net_amount0, net_amount1 = decode_net_amounts(data)
        amount0 = float(net_amount0)
        amount1 = float(net_amount1)

        record = SwapRecord(
            block_number=parse_quantity(_get_field(log, 'blockNumber')),
            amount0=amount0,
            amount1=amount1,
            ratio01=abs_ratio(amount0, amount1),
            ratio10=abs_ratio(amount1, amount0),
            tx_id=normalize_tx_id(_get_field(log, 'transactionHash'))
        )
        self.logs_decoded += 1
        return record

    def get_metrics(self) -> dict[str, int]:
        """Get current decoding metrics.

        Returns:
            Dictionary of metric names to values
        """
        return {
            "logs_decoded": self.logs_decoded,
            "logs_skipped": self.logs_skipped
        }

    def log_metrics(self) -> None:
        """Log current decoding metrics."""
        metrics = self.get_metrics()
        logger.info(
            f"SwapDecoder Metrics: "
            f"Decoded={metrics['logs_decoded']}, "
            f"Skipped={metrics['logs_skipped']}"
        )
