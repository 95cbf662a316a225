import logging

from brickPython.AccessControl import Role
from brickPython.config import ProtocolConfig
from brickPython.DeFiManager import DeFiManager
from brickPython.ERC20 import ERC20
from brickPython.ERC20InterestFarm import ERC20InterestFarm
from brickPython.LpNftStakeFarm import LpNftStakeFarm
from brickPython.LpSft import LpSft
from brickPython.LpSftLendFarm import LpSftLendFarm
from brickPython.uniswap.NonfungiblePositionManager import NonfungiblePositionManager
from brickPython.uniswap.UniswapV3Staker import UniswapV3Staker
from brickPython.UniV3StakeFarm import UniV3StakeFarm

logger = logging.getLogger(__name__)


class Context:
    pass


# Deploys the whole protocol on `chain` and wires up its permissions. The deployer ends up as
# admin of every contract and as the operator of the farms and the DeFiManager.
def deployBrickContracts(chain, deployer, config=None):
    if config is None:
        config = ProtocolConfig.fromEnvironment()

    bc = Context()
    bc.chain = chain
    bc.deployer = deployer
    bc.config = config

    logger.info(
        "Deploying with MAX_BATCH_SIZE: %d, INCENTIVE_DURATION: %d",
        config.maxBatchSize,
        config.incentiveDuration,
    )

    # Tokens
    bc.pow1 = ERC20("POW1", "POW1", config.pow1Decimals, chain, deployer)
    bc.pow5 = ERC20("POW5", "POW5", config.pow5Decimals, chain, deployer)
    bc.lpPow1 = ERC20(
        "LPPOW1", "LPYIELD", config.lpPow1Decimals, chain, deployer, transferable=False
    )
    bc.lpPow5 = ERC20(
        "LPPOW5", "LPPOW5", config.lpPow5Decimals, chain, deployer, transferable=False
    )
    bc.debt = ERC20("DEBT", "DEBT", config.debtDecimals, chain, deployer, transferable=False)
    bc.noPow5 = ERC20("NOPOW5", "NOPOW5", config.noPow5Decimals, chain, deployer)

    # Upstream collaborators
    bc.nftManager = NonfungiblePositionManager("NonfungiblePositionManager", chain, deployer)
    bc.staker = UniswapV3Staker("UniswapV3Staker", chain, deployer, bc.nftManager)

    bc.lpSft = LpSft("LPSFT", chain, deployer, bc.debt)

    bc.defiManager = DeFiManager(
        "DeFiManager",
        chain,
        deployer,
        bc.lpSft,
        bc.pow1,
        bc.pow5,
        bc.lpPow1,
        bc.lpPow5,
        bc.debt,
        bc.noPow5,
        config.maxBatchSize,
    )

    # Farms, all rewarding POW1
    bc.pow1LpNftStakeFarm = LpNftStakeFarm(
        "POW1LpNftStakeFarm",
        chain,
        deployer,
        bc.lpSft,
        bc.nftManager,
        bc.lpPow1,
        bc.pow1,
        config.pow1LpNftStakeFarmRewardRate,
    )
    bc.pow1LpSftLendFarm = LpSftLendFarm(
        "POW1LpSftLendFarm",
        chain,
        deployer,
        bc.lpSft,
        bc.lpPow1,
        bc.pow1,
        config.pow1LpSftLendFarmRewardRate,
        config.maxBatchSize,
    )
    bc.pow5LpNftStakeFarm = UniV3StakeFarm(
        "POW5LpNftStakeFarm",
        chain,
        deployer,
        bc.lpSft,
        bc.nftManager,
        bc.staker,
        bc.lpPow5,
        bc.pow1,
        config.incentiveDuration,
    )
    bc.pow5LpSftLendFarm = LpSftLendFarm(
        "POW5LpSftLendFarm",
        chain,
        deployer,
        bc.lpSft,
        bc.lpPow5,
        bc.pow1,
        config.pow5LpSftLendFarmRewardRate,
        config.maxBatchSize,
    )
    bc.pow5InterestFarm = ERC20InterestFarm(
        "POW5InterestFarm", chain, deployer, bc.pow1, config.pow5InterestRate
    )

    grantRoles(bc)

    # The LP-NFT stake farm checkpoints rewards on every LPPOW1 balance change. The lend farms
    # don't need to, a lent position's LP tokens can't be minted or burned.
    bc.lpPow1.addBalanceListener(bc.pow1LpNftStakeFarm.address, sender=deployer)

    if config.farmFunding > 0:
        for farm in (
            bc.pow1LpNftStakeFarm,
            bc.pow1LpSftLendFarm,
            bc.pow5LpSftLendFarm,
            bc.pow5InterestFarm,
        ):
            bc.pow1.mint(farm.address, config.farmFunding, sender=deployer)

    return bc


def grantRoles(bc):
    deployer = bc.deployer

    # LP-NFT stake farms issue LP-SFTs
    bc.lpSft.grantRole(Role.LPSFT_ISSUER, bc.pow1LpNftStakeFarm.address, sender=deployer)
    bc.lpSft.grantRole(Role.LPSFT_ISSUER, bc.pow5LpNftStakeFarm.address, sender=deployer)

    # The LP-SFT issues the LP tokens backing its positions
    bc.lpPow1.grantRole(Role.ERC20_ISSUER, bc.lpSft.address, sender=deployer)
    bc.lpPow5.grantRole(Role.ERC20_ISSUER, bc.lpSft.address, sender=deployer)

    # The DeFiManager issues POW5 and tracks debt
    bc.pow5.grantRole(Role.ERC20_ISSUER, bc.defiManager.address, sender=deployer)
    bc.debt.grantRole(Role.ERC20_ISSUER, bc.defiManager.address, sender=deployer)

    # POW1 is minted by the deployer to fund the farms
    bc.pow1.grantRole(Role.ERC20_ISSUER, deployer, sender=deployer)

    bc.defiManager.grantRole(Role.DEFI_OPERATOR, deployer, sender=deployer)
    bc.pow5InterestFarm.grantRole(Role.ERC20_FARM_OPERATOR, deployer, sender=deployer)
    bc.pow1LpSftLendFarm.grantRole(Role.LPSFT_FARM_OPERATOR, deployer, sender=deployer)
    bc.pow5LpSftLendFarm.grantRole(Role.LPSFT_FARM_OPERATOR, deployer, sender=deployer)
