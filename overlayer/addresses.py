"""
Address tables for the networks the protocol is deployed on.
"""

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Ethereum mainnet (also valid on a local mainnet fork)
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDT_ADDRESS = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
DAI_ADDRESS = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
WETH_MAINNET_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"

AAVE_POOL_V3_ADDRESS = "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2"

CURVE_DAI_USDC_USDT_POOL = "0xbEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7"
CURVE_DAI_USDC_USDT_LP = "0x6c3F90f043a72FA612cbac8115EE7e52BDe6E490"
CURVE_STABLE_SWAP_FACTORY = "0x6A8cbed756804B16E05E741eDaBd5cB544AE21bf"

UNISWAP_V3_FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
UNISWAP_V3_POSITION_MANAGER = "0xC36442b4a4522E871399CD717aBDD847Ab11FE88"

# Sepolia
USDT_SEPOLIA_ADDRESS = "0xaA8E23Fb1079EA71e0a56F48a2aA51851D8433D0"
OVERLAYER_WRAP_USDT_SEPOLIA = "0x1Ac7E198685e53cCc3599e1656E48Dd7E278EbbE"
OVA_WHITELIST_SEPOLIA = "0x9A58742F11E824B84Aa891EC4EFDFA3932D30f54"
OVA_EXTRACTOR_SEPOLIA = "0x496DEbE2769756044Bbc257Ec48FfEa3199dab77"
VRF_CONSUMER_SEPOLIA = "0x104C7ebB04aec8a6e0823326Ea615565F5f49Fb2"
TEST_MATH_SEPOLIA = "0x0518d5B14A3b1CcE25ae22eAa8099b565b317383"

# Local mainnet fork: reproducible as long as the deployer nonce is untouched
USDO_LOCAL_FORK = "0x72872f101327902fC805637Cccd9A3542ed31e47"
SUSDO_LOCAL_FORK = "0x9E7ef64F17E79366e70C1Fdc01E1A00323e1FCF8"

# OVA beta network
OVA_REFERRAL_BETA = "0x00D15604415907AAE09e5454Ca299f2Ee93fA941"
CURVE_STABLE_STAKE_BETA = "0xF8FF4fD5f485CE0FDAA0043f1Db283d9CB691A9F"

# Mainnet
ROVA_V2_MAINNET = "0x63CF85d1133E8c030B32C63FA97b983BEaE01f83"

SUPPORTED_UNISWAP_TOKENS = [
    USDC_ADDRESS,
    USDT_ADDRESS,
    DAI_ADDRESS,
    WETH_MAINNET_ADDRESS,
]
