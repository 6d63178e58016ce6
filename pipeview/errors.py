class PipeviewError(Exception):
    pass


class EmptyProgramError(PipeviewError, ValueError):
    def __init__(self, message="Please enter at least one MIPS instruction."):
        super().__init__(message)


class ProgramFormatError(PipeviewError, ValueError):
    def __init__(self, invalid):
        self.invalid = list(invalid)
        super().__init__(
            f"Invalid instruction format found: {', '.join(self.invalid)}. "
            "Each instruction must be 8 hexadecimal characters.")


class ConfigError(PipeviewError):
    pass


class TraceError(PipeviewError):
    pass
