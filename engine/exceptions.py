# engine/exceptions.py

class EsdError(Exception):
    pass


class InvalidInput(EsdError):
    pass


class InvalidConfiguration(EsdError):
    pass


class DecompositionError(Exception):
    pass
