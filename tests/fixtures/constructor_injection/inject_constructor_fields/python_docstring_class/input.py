class Account:
    """A bank account."""

    def __init__(self, owner: str, balance: int = 0):
        self.created = True
