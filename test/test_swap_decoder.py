#!/usr/bin/env python3
"""Unit tests for the SwapDecoder module."""

import math
from decimal import Decimal, localcontext

import pytest

from vanilla_swaplog.models import SwapRecord
from vanilla_swaplog.swap_decoder import (
    SwapDecoder,
    abs_ratio,
    decode_net_amounts,
    normalize_tx_id,
    to_token_units,
)

MAX_UINT256 = 2**256 - 1
TX_HASH = '0xabcdef1234567890123456789012345678901234567890123456789012345678'


def encode_swap_data(amount0_in: int, amount1_in: int, amount0_out: int, amount1_out: int) -> str:
    """Encode Swap amounts the way the pool emits them."""
    return '0x' + ''.join(f'{value:064x}' for value in (amount0_in, amount1_in, amount0_out, amount1_out))


def make_log(data, block_number=1000, tx_hash=TX_HASH):
    return {
        'topics': [],
        'data': data,
        'blockNumber': block_number,
        'transactionHash': tx_hash,
        'logIndex': 0
    }


@pytest.fixture
def decoder():
    """Create a SwapDecoder instance for testing."""
    return SwapDecoder()


class TestNetAmounts:
    """Exact decoding of the four amount words."""

    @pytest.mark.parametrize("amounts", [
        (0, 0, 0, 0),
        (10**18, 0, 0, 2 * 10**18),
        (MAX_UINT256, 0, 1, MAX_UINT256),
        (0, MAX_UINT256, MAX_UINT256, 0),
        (123456789012345678901234567890, 1, 98765432109876543210, 7),
    ])
    def test_net_amounts_are_exact(self, amounts):
        """Net amounts keep every digit of 256-bit operands."""
        amount0_in, amount1_in, amount0_out, amount1_out = amounts
        net0, net1 = decode_net_amounts(encode_swap_data(*amounts))

        with localcontext() as ctx:
            ctx.prec = 200
            assert net0 * 10**18 == amount0_in - amount0_out
            assert net1 * 10**18 == amount1_in - amount1_out

    def test_token_units_of_one_wei(self):
        assert to_token_units(1) == Decimal("1E-18")

    def test_token_units_negative(self):
        assert to_token_units(-5 * 10**18) == Decimal(-5)

    def test_missing_word_raises(self):
        """Data shorter than four words is rejected."""
        with pytest.raises(ValueError):
            decode_net_amounts('0x' + '0' * 64)

    def test_invalid_hex_raises(self):
        with pytest.raises(ValueError):
            decode_net_amounts('0x' + 'zz' * 128)


class TestAbsRatio:
    """Ratio semantics for zero denominators."""

    def test_regular_ratio(self):
        assert abs_ratio(-3.0, 1.5) == 2.0

    def test_zero_denominator_is_infinite(self):
        assert abs_ratio(-1.0, 0.0) == math.inf

    def test_zero_over_zero_is_nan(self):
        assert math.isnan(abs_ratio(0.0, 0.0))

    def test_zero_numerator(self):
        assert abs_ratio(0.0, 2.0) == 0.0


class TestSwapDecoder:
    """Test suite for SwapDecoder functionality."""

    def test_decode_single_token_in(self, decoder):
        """10 wei of token0 in and nothing else."""
        data = "0x" + "0" * 63 + "a" + "0" * 64 + "0" * 64 + "0" * 64

        record = decoder.decode_log(make_log(data))

        assert record == SwapRecord(
            block_number=1000,
            amount0=1e-17,
            amount1=0.0,
            ratio01=math.inf,
            ratio10=0.0,
            tx_id=TX_HASH
        )

    def test_decode_known_amounts(self, decoder):
        """Fabricated swap decodes to its whole-token amounts."""
        data = encode_swap_data(25 * 10**17, 0, 0, 5 * 10**18)

        record = decoder.decode_log(make_log(data))

        assert record.amount0 == pytest.approx(2.5)
        assert record.amount1 == pytest.approx(-5.0)
        assert record.ratio01 == pytest.approx(0.5)
        assert record.ratio10 == pytest.approx(2.0)

    @pytest.mark.parametrize("amounts", [
        (1, 0, 0, 3),
        (0, 7 * 10**18, 13 * 10**17, 0),
        (MAX_UINT256, 0, 0, 12345),
    ])
    def test_ratios_are_reciprocal(self, decoder, amounts):
        record = decoder.decode_log(make_log(encode_swap_data(*amounts)))

        assert record.ratio01 * record.ratio10 == pytest.approx(1.0)
        assert record.ratio01 >= 0 and record.ratio10 >= 0

    def test_zero_swap_gives_nan_ratios(self, decoder):
        record = decoder.decode_log(make_log(encode_swap_data(0, 0, 0, 0)))

        assert record.amount0 == 0.0
        assert math.isnan(record.ratio01)
        assert math.isnan(record.ratio10)

    def test_malformed_log_is_skipped(self, decoder):
        """A batch of 5 logs with 1 malformed yields 4 records."""
        logs = [make_log(encode_swap_data(i + 1, 0, 0, i + 2), block_number=i) for i in range(5)]
        logs[2] = make_log(None, block_number=2)

        records = decoder.decode_logs(logs)

        assert len(records) == 4
        assert [r.block_number for r in records] == [0, 1, 3, 4]
        assert decoder.get_metrics() == {"logs_decoded": 4, "logs_skipped": 1}

    @pytest.mark.parametrize("bad_data", [None, 12345, "", ["0x00"]])
    def test_unusable_data_values(self, decoder, bad_data):
        assert decoder.decode_log(make_log(bad_data)) is None
        assert decoder.logs_skipped == 1

    def test_missing_data_key(self, decoder):
        log = make_log(encode_swap_data(1, 0, 0, 1))
        del log['data']

        assert decoder.decode_log(log) is None

    def test_bare_string_log_is_skipped(self, decoder):
        assert decoder.decode_logs([TX_HASH]) == []

    def test_bytes_data_is_decoded(self, decoder):
        """web3.py returns data as bytes."""
        data = bytes.fromhex(encode_swap_data(2 * 10**18, 0, 0, 10**18)[2:])

        record = decoder.decode_log(make_log(data))

        assert record.amount0 == pytest.approx(2.0)
        assert record.amount1 == pytest.approx(-1.0)

    def test_attribute_log_is_decoded(self, decoder):
        """Logs given as objects are read by attribute."""
        class LogReceipt:
            def __init__(self):
                self.data = encode_swap_data(10**18, 0, 0, 10**18)
                self.blockNumber = 42
                self.transactionHash = bytes.fromhex(TX_HASH[2:])

        record = decoder.decode_log(LogReceipt())

        assert record.block_number == 42
        assert record.tx_id == TX_HASH

    def test_block_number_forms(self, decoder):
        data = encode_swap_data(1, 0, 0, 1)

        assert decoder.decode_log(make_log(data, block_number='0x10')).block_number == 16
        assert decoder.decode_log(make_log(data, block_number=None)).block_number == -1

    def test_order_is_preserved(self, decoder):
        logs = [make_log(encode_swap_data(1, 0, 0, 1), block_number=b) for b in (30, 10, 20)]

        records = decoder.decode_logs(logs)

        assert [r.block_number for r in records] == [30, 10, 20]

    def test_invalid_hex_data_raises(self, decoder):
        with pytest.raises(ValueError):
            decoder.decode_log(make_log('0x' + 'g' * 256))


class TestNormalizeTxId:
    """Transaction hash normalization."""

    def test_string_kept_as_is(self):
        assert normalize_tx_id('0xABC') == '0xABC'

    def test_bytes_hex_encoded(self):
        assert normalize_tx_id(b'\xab\xcd') == '0xabcd'

    def test_unknown(self):
        assert normalize_tx_id(None) == 'Unknown'
        assert normalize_tx_id(123) == 'Unknown'
