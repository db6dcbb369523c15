"""
Pairs Backtester
----------------
Statistical-arbitrage pairs trading on a synthetic cointegrated pair.
Causal rolling OLS hedge ratio, rolling z-score of the residual spread,
and a FLAT / LONG_SPREAD / SHORT_SPREAD position state machine.
"""
