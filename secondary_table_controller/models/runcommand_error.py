class RunCommandError(Exception):
    """Raised when a command run through run_command exits non-zero"""

    def __init__(self, error_msg: str, return_code: int):
        super().__init__(error_msg)
        self.error_msg = error_msg
        self.return_code = return_code

    def __str__(self):
        return f"Command failed with return code {self.return_code}: {self.error_msg}"
