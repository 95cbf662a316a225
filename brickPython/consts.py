from brickPython.utilities import ZERO_ADDR

# -----General/shared-----
E_18 = 10**18
# Fixed point precision of the reward-per-token accumulator
REWARD_PRECISION = E_18
DEFAULT_ADMIN_ROLE = bytes(32)

# Time in seconds
HOUR = 60 * 60
DAY = HOUR * 24
YEAR = 365 * DAY

# Timestamp the simulated chain starts at
GENESIS_TIME = 1_700_000_000

REV_MSG_NZ_UINT = "Shared: uint input is empty"
REV_MSG_NZ_ADDR = "Shared: address input is empty"
REV_MSG_NZ_TOKEN_ID = "Shared: token ID is empty"
REV_MSG_BATCH_SIZE = "Shared: batch too large"
REV_MSG_ARR_LEN = "Shared: arrays not same length"
REV_MSG_REENTRANCY = "ReentrancyGuard: reentrant call"

# -----Chain-----
REV_MSG_TIME_TRAVEL = "Chain: time cannot go backwards"

# -----AccessControl-----
REV_MSG_RENOUNCE_SELF = "AccessControl: can only renounce roles for self"

# -----Tokens-----
POW1_DECIMALS = 18
POW5_DECIMALS = 16
LPYIELD_DECIMALS = 16
LPPOW5_DECIMALS = 9
DEBT_DECIMALS = 16
NOPOW5_DECIMALS = 16

REV_MSG_ERC20_EXCEED_BAL = "ERC20: transfer amount exceeds balance"
REV_MSG_ERC20_EXCEED_ALLOWANCE = "ERC20: insufficient allowance"
REV_MSG_ERC20_BURN_EXCEED_BAL = "ERC20: burn amount exceeds balance"
REV_MSG_ERC20_NON_TRANSFERABLE = "ERC20: token is not transferable"
REV_MSG_ERC20_BAD_LISTENER = "ERC20: listener is not a contract"

# -----LP-SFT-----
REV_MSG_LPSFT_EXISTS = "LPSFT: token already minted"
REV_MSG_LPSFT_UNKNOWN = "LPSFT: invalid token ID"
REV_MSG_LPSFT_NOT_OWNER = "LPSFT: caller is not token owner"
REV_MSG_LPSFT_NOT_APPROVED = "LPSFT: caller is not token owner or approved"
REV_MSG_LPSFT_AMOUNT = "LPSFT: amount must be 1"
REV_MSG_LPSFT_NON_RECEIVER = "LPSFT: transfer to non-ERC1155Receiver implementer"
REV_MSG_LPSFT_SELF_APPROVAL = "LPSFT: setting approval status for self"
REV_MSG_LPSFT_DEBT = "LPSFT: position has outstanding debt"

# -----Farms-----
REV_MSG_FARM_EXCEED_STAKE = "Farm: withdraw amount exceeds stake"
REV_MSG_FARM_WRONG_TOKEN = "Farm: caller is not the stake token"
REV_MSG_FARM_WRONG_SFT = "Farm: caller is not the LP-SFT"
REV_MSG_FARM_WRONG_NFT = "Farm: caller is not the LP-NFT"
REV_MSG_FARM_NOT_LENT = "Farm: LP-SFT not lent"
REV_MSG_FARM_DIRECT_TRANSFER = "Farm: direct transfers not accepted"
REV_MSG_FARM_NOT_OWNER = "Farm: caller is not LP-SFT owner"

# -----DeFiManager-----
REV_MSG_DEFI_COLLATERAL = "DeFiManager: insufficient collateral"
REV_MSG_DEFI_UNKNOWN_ASSET = "DeFiManager: unknown asset"

# -----UniV3StakeFarm-----
REV_MSG_UNIV3_INITIALIZED = "UniV3StakeFarm: already initialized"
REV_MSG_UNIV3_NOT_INITIALIZED = "UniV3StakeFarm: not initialized"

# -----Uniswap collaborators-----
REV_MSG_NFT_NOT_OWNER = "ERC721: caller is not token owner or approved"
REV_MSG_NFT_UNKNOWN = "ERC721: invalid token ID"
REV_MSG_NFT_NON_RECEIVER = "ERC721: transfer to non ERC721Receiver implementer"
REV_MSG_NPM_LIQUIDITY = "NonfungiblePositionManager: not enough liquidity"
REV_MSG_STAKER_INCENTIVE_EXISTS = "UniswapV3Staker::createIncentive: incentive already exists"
REV_MSG_STAKER_UNKNOWN_INCENTIVE = "UniswapV3Staker::stakeToken: non-existent incentive"
REV_MSG_STAKER_NOT_DEPOSITED = "UniswapV3Staker: only owner can do this"
REV_MSG_STAKER_ALREADY_STAKED = "UniswapV3Staker::stakeToken: token already staked"
REV_MSG_STAKER_NOT_STAKED = "UniswapV3Staker::unstakeToken: stake does not exist"
REV_MSG_STAKER_STILL_STAKED = "UniswapV3Staker::withdrawToken: cannot withdraw token while staked"
REV_MSG_STAKER_TIME = "UniswapV3Staker::createIncentive: start time must be before end time"

# -----Config defaults-----
# 1 POW1 per second
DEFAULT_REWARD_RATE = E_18
MAX_BATCH_SIZE = 100
INCENTIVE_DURATION = YEAR

# POW1 minted to every farm at deployment to pay out rewards
FARM_FUNDING = 10**6 * E_18
