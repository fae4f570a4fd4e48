"""Domain exceptions raised by the service layer."""


class NotFoundError(LookupError):
    """A referenced row does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")
