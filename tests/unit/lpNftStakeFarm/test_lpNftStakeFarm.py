import pytest
from brickPython.AccessControl import Role
from brickPython.consts import *
from brickPython.Errors import UnknownPosition
from utils import *


@pytest.fixture
def stakeFarm(bc):
    bc.pow1LpNftStakeFarm.setRewardRate(100, sender=bc.DEPLOYER)
    return bc.pow1LpNftStakeFarm


def test_stake(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    account = bc.lpSft.tokenIdToAddress(tokenId)

    assert bc.nftManager.ownerOf(tokenId) == stakeFarm.address
    assert bc.lpSft.ownerOf(tokenId) == bc.ALICE
    assert bc.lpPow1.balanceOf(account) == 1000
    assert stakeFarm.balanceOf(account) == 1000
    assert stakeFarm.totalLiquidity() == 1000

    event = stakeFarm.getEvents("Staked")[-1]
    assert event.values == {"tokenId": tokenId, "owner": bc.ALICE, "liquidity": 1000}


def test_stake_earn(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    account = bc.lpSft.tokenIdToAddress(tokenId)
    bc.chain.sleep(10)

    assert stakeFarm.rewardPerToken() == E_18
    assert stakeFarm.earned(account) == 1000


def test_listener_checkpoints_existing_stakers(bc, stakeFarm):
    tokenIdA = stakeLpNft(bc, bc.ALICE, 100)
    bc.chain.sleep(10)
    # Minting BOB's LP tokens checkpoints the pool before the supply grows
    tokenIdB = stakeLpNft(bc, bc.BOB, 300)
    bc.chain.sleep(10)

    accountA = bc.lpSft.tokenIdToAddress(tokenIdA)
    accountB = bc.lpSft.tokenIdToAddress(tokenIdB)
    assert stakeFarm.earned(accountA) == 1000 + 250
    assert stakeFarm.earned(accountB) == 750


def test_claim(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    account = bc.lpSft.tokenIdToAddress(tokenId)
    bc.chain.sleep(10)

    assert stakeFarm.claim(tokenId, sender=bc.ALICE) == 1000
    assert bc.pow1.balanceOf(bc.ALICE) == 1000
    assert stakeFarm.earned(account) == 0

    # The reward follows the LP-SFT holder
    bc.lpSft.safeTransferFrom(bc.ALICE, bc.BOB, tokenId, 1, b"", sender=bc.ALICE)
    bc.chain.sleep(5)
    assert stakeFarm.claim(tokenId, sender=bc.BOB) == 500
    assert bc.pow1.balanceOf(bc.BOB) == 500


def test_claim_rev(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    with reverts(REV_MSG_FARM_NOT_OWNER):
        stakeFarm.claim(tokenId, sender=bc.BOB)
    with reverts(UnknownPosition):
        stakeFarm.claim(tokenId + 1, sender=bc.ALICE)


def test_unstake(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    account = bc.lpSft.tokenIdToAddress(tokenId)
    bc.chain.sleep(10)

    unstakeLpSft(bc, bc.ALICE, tokenId)

    assert bc.pow1.balanceOf(bc.ALICE) == 1000
    assert bc.nftManager.ownerOf(tokenId) == bc.ALICE
    assert bc.lpSft.tokenIdToAddress(tokenId) == ZERO_ADDR
    assert bc.lpPow1.balanceOf(account) == 0
    assert stakeFarm.totalLiquidity() == 0
    assert account not in stakeFarm.stakeAccounts

    event = stakeFarm.getEvents("Unstaked")[-1]
    assert event.values == {"tokenId": tokenId, "owner": bc.ALICE, "reward": 1000}


def test_unstake_rev_outstanding_debt(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 500)
    account = bc.lpSft.tokenIdToAddress(tokenId)
    bc.defiManager.issue(tokenId, 500, bc.DEPLOYER, sender=bc.DEPLOYER)
    bc.chain.sleep(10)

    with reverts(REV_MSG_LPSFT_DEBT):
        unstakeLpSft(bc, bc.ALICE, tokenId)

    # The position is untouched, its collateral still backs the debt
    assert bc.lpSft.ownerOf(tokenId) == bc.ALICE
    assert bc.nftManager.ownerOf(tokenId) == stakeFarm.address
    assert bc.defiManager.collateralBalance(tokenId) == 500
    assert bc.defiManager.debtBalance(tokenId) == 500
    assert stakeFarm.earned(account) == 1000
    assert bc.pow1.balanceOf(bc.ALICE) == 0

    # Once repaid the position can be unstaked
    bc.defiManager.repay(tokenId, 500, sender=bc.DEPLOYER)
    unstakeLpSft(bc, bc.ALICE, tokenId)
    assert bc.nftManager.ownerOf(tokenId) == bc.ALICE
    assert bc.pow1.balanceOf(bc.ALICE) == 1000


def test_restake(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    bc.chain.sleep(10)
    unstakeLpSft(bc, bc.ALICE, tokenId)

    # Staking the same LP-NFT again starts from zero
    bc.nftManager.safeTransferFrom(
        bc.ALICE, stakeFarm.address, tokenId, b"", sender=bc.ALICE
    )
    account = bc.lpSft.tokenIdToAddress(tokenId)
    assert stakeFarm.earned(account) == 0
    bc.chain.sleep(1)
    assert stakeFarm.earned(account) == 100


def test_hooks_rev_wrong_caller(bc, stakeFarm):
    tokenId = stakeLpNft(bc, bc.ALICE, 1000)
    account = bc.lpSft.tokenIdToAddress(tokenId)

    with reverts(REV_MSG_FARM_WRONG_NFT):
        stakeFarm.onERC721Received(bc.ALICE, bc.ALICE, tokenId, b"", sender=bc.ALICE)
    with reverts(REV_MSG_FARM_WRONG_SFT):
        stakeFarm.onERC1155Received(
            bc.ALICE, bc.ALICE, tokenId, 1, b"", sender=bc.ALICE
        )
    with reverts(REV_MSG_FARM_WRONG_TOKEN):
        stakeFarm.onStakeBalanceChange(account, sender=bc.ALICE)


def test_unstake_rev_wrong_lp_token(bc, stakeFarm):
    # Positions of the UniV3 stake farm are backed by LPPOW5
    bc.lpSft.grantRole(Role.LPSFT_ISSUER, bc.DEPLOYER, sender=bc.DEPLOYER)
    bc.lpSft.mint(bc.ALICE, 99, bc.lpPow5, 10, sender=bc.DEPLOYER)

    with reverts(REV_MSG_FARM_WRONG_TOKEN):
        bc.lpSft.safeTransferFrom(
            bc.ALICE, stakeFarm.address, 99, 1, b"", sender=bc.ALICE
        )
    assert bc.lpSft.ownerOf(99) == bc.ALICE
