from contextlib import contextmanager

import pytest
from brickPython.Errors import Revert


# Expects a Revert, matching either its reason string or its error class
@contextmanager
def reverts(expected=None):
    with pytest.raises(Revert) as excinfo:
        yield excinfo

    if isinstance(expected, str):
        assert excinfo.value.reason == expected, excinfo.value.reason
    elif expected is not None:
        assert isinstance(excinfo.value, expected), type(excinfo.value)


# Mints an LP-NFT to `owner`, funding the principal from the deployer
def mintLpNft(bc, owner, liquidity, amount0=0, amount1=0):
    if amount0 > 0:
        bc.pow1.mint(owner, amount0, sender=bc.DEPLOYER)
        bc.pow1.approve(bc.nftManager.address, amount0, sender=owner)
    if amount1 > 0:
        bc.pow5.mint(owner, amount1, sender=bc.DEPLOYER)
        bc.pow5.approve(bc.nftManager.address, amount1, sender=owner)
    return bc.nftManager.mint(
        owner, bc.pow1, bc.pow5, liquidity, amount0, amount1, sender=owner
    )


# Stakes a new LP-NFT in the POW1 LP-NFT stake farm, `owner` receives the LP-SFT
def stakeLpNft(bc, owner, liquidity):
    tokenId = mintLpNft(bc, owner, liquidity)
    bc.nftManager.safeTransferFrom(
        owner, bc.pow1LpNftStakeFarm.address, tokenId, b"", sender=owner
    )
    return tokenId


def unstakeLpSft(bc, owner, tokenId):
    bc.lpSft.safeTransferFrom(
        owner, bc.pow1LpNftStakeFarm.address, tokenId, 1, b"", sender=owner
    )


def lendLpSfts(bc, farm, tokenIds):
    bc.lpSft.setApprovalForAll(farm.address, True, sender=bc.DEPLOYER)
    farm.lendLpSftBatch(tokenIds, sender=bc.DEPLOYER)
