class AuthFlowError(Exception):
    """A step of the smoke flow failed and later steps cannot run."""

    def __init__(self, message: str, step: str = None):
        self.step = step
        super().__init__(f"{step}: {message}" if step else message)
