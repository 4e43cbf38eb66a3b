"""
Contract Operations
===================

One function per deployment, query or transfer:
- erc20: protocol ERC20 tokens, allowances, transfers and balances
- stablecoin: USDO/USDxM, staked vaults, rewards distributor, OverlayerWrap
- liquidity: Liquidity farm, Curve pools and staking rewards
- uniswap: UniswapV3 liquidity proxy and staker
- whitelist: OvaWhitelist management
- rova: rOVA / rOVAV2 batch allocations
- vrf: Chainlink subscription consumer (OvaExtractor) and TestMath
"""
