class ValidationError(Exception):
    """Exception raised when a request body cannot be turned into a driver call.
    NOTE: Messages in these errors are returned to the client in the error envelope, so keep them shareable. """
    
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)
