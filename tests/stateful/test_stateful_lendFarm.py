from brickPython.Account import Account
from brickPython.Chain import Chain
from brickPython.config import ProtocolConfig
from brickPython.consts import *
from brickPython.deploy import deployBrickContracts
from brickPython.Errors import UnknownPosition
from hypothesis import settings
from hypothesis import strategies as hypStrat
from hypothesis.stateful import RuleBasedStateMachine, invariant, rule, run_state_machine_as_test
from utils import *

INIT_LIQUIDITY = [1, 10**3, 10**6, 10**9, 10**12]
# Low enough that the farm's funding covers every run
MAX_REWARD_RATE = 10**15


# Stateful test for lending and withdrawing LP-SFTs in the LpSftLendFarm
def test_lpSftLendFarm():

    DEPLOYER = Account("DEPLOYER").address

    class StateMachine(RuleBasedStateMachine):

        """
        This test lends and withdraws a handful of positions, alone and in batches, while time
        passes. Batches sometimes include an unmapped token ID, which must abort the whole batch.
        Rewards must be conserved: what the farm paid out plus what is still owed never exceeds
        what was emitted, and the farm's POW1 only ever moves to position accounts.
        """

        def __init__(self):
            super().__init__()
            self.chain = Chain()
            self.bc = deployBrickContracts(self.chain, DEPLOYER, ProtocolConfig())
            self.bc.DEPLOYER = DEPLOYER
            self.farm = self.bc.pow1LpSftLendFarm

            self.tokenIds = [
                stakeLpNft(self.bc, DEPLOYER, liquidity) for liquidity in INIT_LIQUIDITY
            ]
            self.accounts = self.bc.lpSft.tokenIdsToAddresses(self.tokenIds)
            self.liquidity = dict(zip(self.tokenIds, INIT_LIQUIDITY))
            self.bc.lpSft.setApprovalForAll(self.farm.address, True, sender=DEPLOYER)
            self.farm.setRewardRate(MAX_REWARD_RATE, sender=DEPLOYER)

            self.lent = set()
            self.paid = 0
            self.rewardRate = self.farm.rewardRate()
            self.emitted = 0
            self.numTxsTested = 0

        st_indices = hypStrat.lists(
            hypStrat.integers(min_value=0, max_value=len(INIT_LIQUIDITY) - 1),
            min_size=1,
            max_size=len(INIT_LIQUIDITY),
            unique=True,
        )
        st_unmapped = hypStrat.booleans()
        st_sleep_time = hypStrat.integers(min_value=1, max_value=7 * DAY)
        st_rate = hypStrat.integers(min_value=0, max_value=MAX_REWARD_RATE)

        @rule(st_indices=st_indices, st_unmapped=st_unmapped)
        def rule_lendBatch(self, st_indices, st_unmapped):
            tokenIds = [self.tokenIds[i] for i in st_indices]
            if st_unmapped:
                tokenIds.append(max(self.tokenIds) + 1)

            # Positions are lent in order, the first bad one aborts the batch
            expected = None
            for tokenId in tokenIds:
                if tokenId not in self.liquidity:
                    expected = UnknownPosition
                elif tokenId in self.lent:
                    expected = REV_MSG_LPSFT_NOT_OWNER
                if expected is not None:
                    break

            if expected is not None:
                print("        ", expected, "rule_lendBatch", tokenIds)
                with reverts(expected):
                    self.farm.lendLpSftBatch(tokenIds, sender=DEPLOYER)
            else:
                print("                    rule_lendBatch", tokenIds)
                self.farm.lendLpSftBatch(tokenIds, sender=DEPLOYER)
                self.lent.update(tokenIds)
                self.numTxsTested += 1

        @rule(st_indices=st_indices, st_unmapped=st_unmapped)
        def rule_withdrawBatch(self, st_indices, st_unmapped):
            tokenIds = [self.tokenIds[i] for i in st_indices]
            if st_unmapped:
                tokenIds.insert(len(tokenIds) // 2, max(self.tokenIds) + 1)

            expected = None
            for tokenId in tokenIds:
                if tokenId not in self.liquidity:
                    expected = UnknownPosition
                elif tokenId not in self.lent:
                    expected = REV_MSG_FARM_NOT_LENT
                if expected is not None:
                    break

            if expected is not None:
                print("        ", expected, "rule_withdrawBatch", tokenIds)
                with reverts(expected):
                    self.farm.withdrawLpSftBatch(tokenIds, sender=DEPLOYER)
            else:
                print("                    rule_withdrawBatch", tokenIds)
                accounts = self.bc.lpSft.tokenIdsToAddresses(tokenIds)
                earned = [self.farm.earned(account) for account in accounts]

                rewards = self.farm.withdrawLpSftBatch(tokenIds, sender=DEPLOYER)

                assert rewards == earned
                self.paid += sum(rewards)
                self.lent.difference_update(tokenIds)
                self.numTxsTested += 1

        @rule(st_rate=st_rate)
        def rule_setRewardRate(self, st_rate):
            print("                    rule_setRewardRate", st_rate)
            self.farm.setRewardRate(st_rate, sender=DEPLOYER)
            self.rewardRate = st_rate

        @rule(st_sleep_time=st_sleep_time)
        def rule_sleep(self, st_sleep_time):
            print("                    rule_sleep", st_sleep_time)
            if self.lent:
                self.emitted += self.rewardRate * st_sleep_time
            self.chain.sleep(st_sleep_time)

        # Custody follows the model and only lent positions count towards the farm
        @invariant()
        def invariant_custody(self):
            for tokenId, account in zip(self.tokenIds, self.accounts):
                if tokenId in self.lent:
                    assert self.bc.lpSft.ownerOf(tokenId) == self.farm.address
                    assert self.farm.balanceOf(account) == self.liquidity[tokenId]
                else:
                    assert self.bc.lpSft.ownerOf(tokenId) == DEPLOYER
                    assert self.farm.balanceOf(account) == 0
            assert self.farm.totalLiquidity() == sum(
                self.liquidity[tokenId] for tokenId in self.lent
            )
            assert sorted(self.bc.lpSft.getTokenIds(self.farm.address)) == sorted(self.lent)

        @invariant()
        def invariant_rewards(self):
            owed = sum(self.farm.earned(account) for account in self.accounts)
            assert self.paid + owed <= self.emitted

            paidToAccounts = sum(self.bc.pow1.balanceOf(account) for account in self.accounts)
            assert paidToAccounts == self.paid
            assert self.bc.pow1.balanceOf(self.farm.address) == FARM_FUNDING - self.paid

        def teardown(self):
            print(f"Total rules executed = {self.numTxsTested}")

    run_state_machine_as_test(
        StateMachine,
        settings=settings(max_examples=50, stateful_step_count=100, deadline=None),
    )
