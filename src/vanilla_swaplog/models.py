#!/usr/bin/env python3
"""Data models for the Vanilla swap log viewer.

This module provides immutable data classes for decoded swap records and
the trading pairs offered for selection.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class SwapRecord:
    """A decoded Swap event, one grid row.

    Attributes:
        block_number: Block containing the event, -1 if unknown
        amount0: Net token0 amount (in minus out) in whole tokens
        amount1: Net token1 amount (in minus out) in whole tokens
        ratio01: |amount0 / amount1|, may be inf or nan
        ratio10: |amount1 / amount0|, may be inf or nan
        tx_id: Transaction hash or "Unknown"
    """

    block_number: int
    amount0: float
    amount1: float
    ratio01: float
    ratio10: float
    tx_id: str

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"SwapRecord(block={self.block_number}, "
            f"amount0={self.amount0}, "
            f"amount1={self.amount1}, "
            f"tx={self.tx_id[:10]}...)"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a grid row keyed by column field."""
        return {
            "Block": self.block_number,
            "Amount0": self.amount0,
            "Amount1": self.amount1,
            "Ratio_0_1": self.ratio01,
            "Ratio_1_0": self.ratio10,
            "tx_id": self.tx_id
        }


@dataclass(frozen=True, slots=True)
class TradingPair:
    """A pool listed by the pair directory."""

    token0_symbol: str
    token1_symbol: str
    pool_id: str

    @classmethod
    def from_graph(cls, pair: dict[str, Any]) -> "TradingPair":
        """Build from a subgraph `pairs` entry.

        Raises:
            KeyError: If the entry lacks a token symbol or id
        """
        return cls(
            token0_symbol=pair["token0"]["symbol"],
            token1_symbol=pair["token1"]["symbol"],
            pool_id=pair["id"]
        )


@dataclass(frozen=True, slots=True)
class FormattedPairOption:
    """Selectable entry shown to the user, `text` is "TOKEN0:TOKEN1"."""

    text: str
    value: str

    @classmethod
    def from_pair(cls, pair: TradingPair) -> "FormattedPairOption":
        return cls(
            text=f"{pair.token0_symbol}:{pair.token1_symbol}",
            value=pair.pool_id
        )
