import os
from dataclasses import dataclass, fields

from brickPython.consts import *


@dataclass
class ProtocolConfig:
    pow1LpNftStakeFarmRewardRate: int = DEFAULT_REWARD_RATE
    pow1LpSftLendFarmRewardRate: int = DEFAULT_REWARD_RATE
    pow5LpSftLendFarmRewardRate: int = DEFAULT_REWARD_RATE
    pow5InterestRate: int = DEFAULT_REWARD_RATE
    maxBatchSize: int = MAX_BATCH_SIZE
    incentiveDuration: int = INCENTIVE_DURATION
    pow1Decimals: int = POW1_DECIMALS
    pow5Decimals: int = POW5_DECIMALS
    lpPow1Decimals: int = LPYIELD_DECIMALS
    lpPow5Decimals: int = LPPOW5_DECIMALS
    debtDecimals: int = DEBT_DECIMALS
    noPow5Decimals: int = NOPOW5_DECIMALS
    farmFunding: int = FARM_FUNDING

    # NOTE: Variables are read as BRICK_<FIELD> in upper snake case, e.g. BRICK_MAX_BATCH_SIZE.
    # Unset or empty variables fall back to the defaults above.
    @classmethod
    def fromEnvironment(cls, environment=None):
        if environment is None:
            environment = os.environ

        values = {}
        for field in fields(cls):
            key = "BRICK_" + toSnakeCase(field.name).upper()
            values[field.name] = int(environment.get(key) or field.default)

        return cls(**values)


def toSnakeCase(name):
    return "".join("_" + c.lower() if c.isupper() else c for c in name)
