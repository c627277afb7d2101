class SetupError(Exception):
    """Raised at startup when the MONGO_* / PORT / LOG_LEVEL environment settings are unusable."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)
