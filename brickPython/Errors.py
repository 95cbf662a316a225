### @title Errors
### @notice Typed reverts raised by the contracts. Every revert aborts the whole call; the
### enclosing Chain transaction restores the state of all contracts before re-raising.


class Revert(Exception):
    """Base class of every revert. ``reason`` is the revert message, the remaining
    keyword arguments are kept as attributes so the offending input can be inspected."""

    def __init__(self, reason, **context):
        self.reason = reason
        self.context = context
        for key, value in context.items():
            setattr(self, key, value)
        super().__init__(reason)

    def __str__(self):
        if not self.context:
            return self.reason
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.reason} ({details})"


class AuthorizationError(Revert):
    def __init__(self, role, account):
        super().__init__(
            f"AccessControl: account {account} is missing role {role.name}",
            role=role,
            account=account,
        )


class ValidationError(Revert):
    pass


class InsufficientResource(Revert):
    pass


class InsufficientBalance(InsufficientResource):
    def __init__(self, reason, account, amount, available):
        super().__init__(reason, account=account, amount=amount, available=available)


class InsufficientAllowance(InsufficientResource):
    def __init__(self, reason, owner, spender, amount, available):
        super().__init__(
            reason, owner=owner, spender=spender, amount=amount, available=available
        )


class InsufficientCollateral(InsufficientResource):
    def __init__(self, reason, tokenId, debt, collateral):
        super().__init__(reason, tokenId=tokenId, debt=debt, collateral=collateral)


class UnknownPosition(Revert):
    def __init__(self, reason, tokenId):
        super().__init__(reason, tokenId=tokenId)


class ReentrancyError(Revert):
    def __init__(self, reason, contract):
        super().__init__(reason, contract=contract)
