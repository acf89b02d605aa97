class InvalidSourceKind(TypeError):
    """Raised when a wait is given something that can neither be subscribed to nor run."""

    def __init__(self, source, index: int):
        self.source = source
        self.index = index
        super().__init__(
            f"Source #{index} of type {type(source).__name__} is not triggerable: "
            f"expected a playback, a signal (once/connect) or a zero-argument callable"
        )
