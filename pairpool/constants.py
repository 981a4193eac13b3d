"""
Pool-wide constants.

Coin and fee-rate bounds live with the arithmetic in ``kernels.fixed_point``.
"""

# Fee collection is not forced below this many units per accumulator.
REQUIRED_MIN_COLLECT_FEES = 1_000_000

# Collector reward is total / 1000 (0.1%).
COLLECTOR_REWARD_DIVIDER = 1_000

MIN_LIQUIDITY = 1_000
MIN_SWAP_AMOUNT = 1

# Native-coin gas units.
TRANSFER_GAS = 50_000_000
MIN_OPERATING_RESERVE = 10_000_000
