from brickPython.consts import REWARD_PRECISION
from brickPython.utilities import checkInputTypes, checkUInt256, mulDiv

### @title RewardMath
### @notice Reward-per-token accrual shared by every farm
### @dev Stateless. Integer division truncates, so rounding never over-credits a staker


### @notice Calculates the reward per token accumulator after `secondsElapsed`
### @param rewardPerTokenStored The accumulator as of the last update, scaled by 1e18
### @param secondsElapsed Time since the last update
### @param rewardRate Reward emitted per second
### @param totalStaked Total stake at the time of the update
### @return The new accumulator. Unchanged when nothing is staked
def calculateRewardPerToken(rewardPerTokenStored, secondsElapsed, rewardRate, totalStaked):
    checkInputTypes(
        uint256=(rewardPerTokenStored, secondsElapsed, rewardRate, totalStaked)
    )

    # No accrual into an empty pool, which also avoids the division by zero
    if totalStaked == 0:
        return rewardPerTokenStored

    rewardPerToken = rewardPerTokenStored + mulDiv(
        secondsElapsed * rewardRate, REWARD_PRECISION, totalStaked
    )
    checkUInt256(rewardPerToken)
    return rewardPerToken


### @notice Calculates the rewards earned by an account
### @param staked The account's stake
### @param rewardPerToken The current accumulator
### @param rewardPerTokenPaid The accumulator as of the account's last update
### @param accruedRewards Rewards already accrued but not claimed
### @return The total claimable reward
def calculateEarned(staked, rewardPerToken, rewardPerTokenPaid, accruedRewards):
    checkInputTypes(uint256=(staked, rewardPerToken, rewardPerTokenPaid, accruedRewards))
    # Guaranteed by the update protocol, the checkpoint never runs ahead of the accumulator
    assert rewardPerToken >= rewardPerTokenPaid, "Checkpoint ahead of accumulator"

    earned = accruedRewards + mulDiv(
        staked, rewardPerToken - rewardPerTokenPaid, REWARD_PRECISION
    )
    checkUInt256(earned)
    return earned
