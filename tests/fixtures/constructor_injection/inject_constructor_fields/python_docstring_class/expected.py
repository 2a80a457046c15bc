class Account:
    """A bank account."""
    _owner: str
    _balance: int

    def __init__(self, owner: str, balance: int = 0):
        self.created = True
        self._owner = owner
        self._balance = balance
