class SettlementConsistencyError(RuntimeError):
    """
    Raised when balances cannot be fully settled.

    This means the balances fed to the minimizer did not sum to zero, so
    something upstream broke conservation. It is a server-side fault, not
    a bad request.
    """

    def __init__(self, residual: dict):
        self.residual = residual
        details = ", ".join(f"{mid}: {amt}" for mid, amt in residual.items())
        super().__init__(f"Unsettled balances remain after matching ({details})")
